import base64
from dataclasses import dataclass, field
from enum import Enum


class ErrorKind(str, Enum):
    VALIDATION = 'validation'
    CONNECTIVITY = 'connectivity'
    GENERATION = 'generation'
    UPLOAD = 'upload'
    INSUFFICIENT_FUNDS = 'insufficient_funds'
    REJECTED = 'rejected'
    TRANSACTION = 'transaction'
    BUSY = 'busy'


@dataclass(frozen=True)
class MintFailure:
    kind: ErrorKind
    message: str
    detail: str = None


@dataclass(frozen=True)
class StageResult:
    ok: bool
    value: object = None
    error: MintFailure = None

    @classmethod
    def success(cls, value=None):
        return cls(ok=True, value=value)

    @classmethod
    def failure(cls, kind, message, detail=None):
        return cls(ok=False, error=MintFailure(kind, message, detail))


@dataclass(frozen=True)
class SessionContext:
    """Wallet/network binding. Replaced as a whole, never edited in place."""
    provider: object = None
    account: str = None
    chain_id: int = None
    contract: object = None
    private_key: str = field(default=None, repr=False)
    notice: str = None

    @property
    def can_mint(self):
        return self.contract is not None

    def to_dict(self):
        return {
            'account': self.account,
            'chain_id': self.chain_id,
            'contract_address': self.contract.address if self.contract is not None else None,
            'connected': self.provider is not None,
            'can_mint': self.can_mint,
            'notice': self.notice,
        }


@dataclass(frozen=True)
class GeneratedImage:
    data: bytes
    content_type: str = 'image/jpeg'

    def data_url(self):
        encoded = base64.b64encode(self.data).decode('ascii')
        return f'data:{self.content_type};base64,{encoded}'


@dataclass
class MintRequest:
    name: str
    description: str
    image: GeneratedImage = None
    url: str = None
    message: str = ''
    is_waiting: bool = False
    transaction_hash: str = None


@dataclass
class MintOutcome:
    success: bool
    message: str
    kind: ErrorKind = None
    image: str = None
    token_uri: str = None
    transaction_hash: str = None
    stages: list = field(default_factory=list)
    mint_id: str = None

    @classmethod
    def from_request(cls, request, stages, failure=None, message=None):
        return cls(
            success=failure is None,
            message=failure.message if failure else message,
            kind=failure.kind if failure else None,
            image=request.image.data_url() if request.image else None,
            token_uri=request.url,
            transaction_hash=request.transaction_hash,
            stages=list(stages),
        )

    def to_dict(self):
        return {
            'success': self.success,
            'message': self.message,
            'kind': self.kind.value if self.kind else None,
            'image': self.image,
            'tokenURI': self.token_uri,
            'transactionHash': self.transaction_hash,
            'stages': self.stages,
            'mintId': self.mint_id,
        }
