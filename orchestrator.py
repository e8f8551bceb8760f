import logging

from mint_tracker import MintTracker
from models import ErrorKind, MintOutcome, MintRequest, StageResult

logger = logging.getLogger(__name__)

MISSING_FIELDS = 'Please provide a name and description'
NOT_CONNECTED = 'Blockchain connection not established. Please check your network.'
BUSY = 'A mint is already in progress.'
MINT_SUCCESSFUL = 'Mint successful!'


def validate_fields(name, description):
    if not (name or '').strip() or not (description or '').strip():
        return StageResult.failure(ErrorKind.VALIDATION, MISSING_FIELDS)
    return StageResult.success()


def require_contract(session):
    if session is None or not session.can_mint:
        return StageResult.failure(ErrorKind.CONNECTIVITY, NOT_CONNECTED)
    return StageResult.success()


class MintOrchestrator:
    """
    Runs one submission through generate -> pin -> mint.

    Every stage returns a StageResult and the first failure ends the
    attempt. Nothing is carried over between submissions.
    """

    def __init__(self, generator, pinner, minter, tracker=None, log=None):
        self.generator = generator
        self.pinner = pinner
        self.minter = minter
        self.tracker = tracker or MintTracker()
        self.log = log or logger

    def submit(self, name, description, session):
        request = MintRequest(name=name, description=description)
        stages = []

        for stage, check in (('validate', lambda: validate_fields(name, description)),
                             ('connect', lambda: require_contract(session))):
            stages.append(stage)
            result = check()
            if not result.ok:
                self.log.warning(f'Mint rejected before start: {result.error.message}')
                return MintOutcome.from_request(request, stages, failure=result.error)

        mint_id = self.tracker.start(name, description)
        if mint_id is None:
            failure = StageResult.failure(ErrorKind.BUSY, BUSY).error
            return MintOutcome.from_request(request, stages, failure=failure)

        request.is_waiting = True
        outcome = None
        try:
            outcome = self._run(mint_id, request, session, stages)
        except Exception as e:
            self.log.error(f'Error in submit handler: {str(e)}')
            failure = StageResult.failure(ErrorKind.TRANSACTION, f'Error: {str(e)}', str(e)).error
            outcome = MintOutcome.from_request(request, stages, failure=failure)
        finally:
            request.is_waiting = False
            if outcome is not None:
                outcome.mint_id = mint_id
            self.tracker.finish(mint_id, outcome)
        return outcome

    def _status(self, mint_id, request, status, message, **fields):
        request.message = message
        self.tracker.update(mint_id, status, message, **fields)

    def _run(self, mint_id, request, session, stages):
        stages.append('generate')
        self._status(mint_id, request, 'generating', 'Generating Image...')
        result = self.generator.generate(request.description)
        if not result.ok:
            return MintOutcome.from_request(request, stages, failure=result.error)
        request.image = result.value

        stages.append('pin')
        self._status(mint_id, request, 'uploading', 'Uploading Image...')
        result = self.pinner.pin_file(request.image.data, request.name, request.description)
        if not result.ok:
            return MintOutcome.from_request(request, stages, failure=result.error)
        request.url = result.value

        stages.append('mint')
        self._status(mint_id, request, 'minting', 'Waiting for Mint...', token_uri=request.url)
        result = self.minter.mint(session, request.url)
        if not result.ok:
            return MintOutcome.from_request(request, stages, failure=result.error)
        request.transaction_hash = result.value

        request.message = MINT_SUCCESSFUL
        self.log.info(f'Minted {request.url} in {request.transaction_hash}')
        return MintOutcome.from_request(request, stages, message=MINT_SUCCESSFUL)
