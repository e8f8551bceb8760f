import threading
import uuid
from datetime import datetime


class MintTracker:
    """
    In-memory record of mint attempts and of the one that is in flight.

    Nothing here survives a restart.
    """

    def __init__(self):
        self.mints = {}
        self.current_id = None
        self._in_flight = threading.Lock()

    @property
    def is_waiting(self):
        return self._in_flight.locked()

    def start(self, name, description):
        """
        Register a new attempt and mark it in flight.

        Returns None when another attempt is still running.
        """
        if not self._in_flight.acquire(blocking=False):
            return None

        mint_id = str(uuid.uuid4())
        self.mints[mint_id] = {
            'id': mint_id,
            'name': name,
            'description': description,
            'status': 'pending',
            'message': '',
            'created_at': datetime.utcnow(),
            'token_uri': None,
            'tx_hash': None,
            'error': None
        }
        self.current_id = mint_id
        return mint_id

    def update(self, mint_id, status, message, **fields):
        record = self.mints[mint_id]
        record['status'] = status
        record['message'] = message
        record.update(fields)

    def finish(self, mint_id, outcome):
        """Store the outcome and re-arm for the next submission."""
        try:
            record = self.mints[mint_id]
            record['finished_at'] = datetime.utcnow()
            if outcome is None:
                record['status'] = 'failed'
                return
            record['status'] = 'minted' if outcome.success else 'failed'
            record['message'] = outcome.message
            record['token_uri'] = outcome.token_uri
            record['tx_hash'] = outcome.transaction_hash
            if not outcome.success:
                record['error'] = outcome.kind.value
        finally:
            self._in_flight.release()

    def get_status(self, mint_id):
        if mint_id not in self.mints:
            return {'error': 'Mint not found'}

        mint_data = self.mints[mint_id].copy()
        mint_data['is_waiting'] = self.is_waiting and mint_id == self.current_id

        # Convert datetime to string for JSON
        if 'created_at' in mint_data:
            mint_data['created_at'] = mint_data['created_at'].isoformat()
        if 'finished_at' in mint_data:
            mint_data['finished_at'] = mint_data['finished_at'].isoformat()

        return mint_data

    def current(self):
        if self.current_id is None:
            return {'status': 'idle', 'message': '', 'is_waiting': False}
        return self.get_status(self.current_id)
