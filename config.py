import os

from dotenv import load_dotenv

# Load variables from a .env file next to the app, if there is one
load_dotenv()

BASE_DIR = os.path.dirname(os.path.abspath(__file__))

OPEN_CAMPUS_CODEX_CHAIN_ID = 656476
NETWORK_NAMES = {
    OPEN_CAMPUS_CODEX_CHAIN_ID: 'Open campus codex Sepolia',
}


def _optional_float(name):
    value = os.getenv(name)
    if value in (None, ''):
        return None
    return float(value)


class Config:
    """Settings for the minter, read from the environment."""

    def __init__(self, **overrides):
        self.HUGGING_FACE_API_KEY = os.getenv('HUGGING_FACE_API_KEY')
        self.HUGGING_FACE_MODEL_URL = os.getenv(
            'HUGGING_FACE_MODEL_URL',
            'https://api-inference.huggingface.co/models/black-forest-labs/FLUX.1-dev'
        )
        self.PINATA_API_KEY = os.getenv('PINATA_API_KEY')
        self.PINATA_SECRET_API_KEY = os.getenv('PINATA_SECRET_API_KEY')
        self.PINATA_PIN_FILE_URL = os.getenv(
            'PINATA_PIN_FILE_URL', 'https://api.pinata.cloud/pinning/pinFileToIPFS'
        )
        self.PINATA_GATEWAY_URL = os.getenv('PINATA_GATEWAY_URL', 'https://gateway.pinata.cloud/ipfs/')

        self.WALLET_RPC_URL = os.getenv('WALLET_RPC_URL') or os.getenv('SEPOLIA_RPC_URL')
        self.PRIVATE_KEY = os.getenv('PRIVATE_KEY')
        self.SUPPORTED_CHAIN_ID = int(os.getenv('SUPPORTED_CHAIN_ID', OPEN_CAMPUS_CODEX_CHAIN_ID))

        self.NFT_CONFIG_PATH = os.getenv('NFT_CONFIG_PATH', os.path.join(BASE_DIR, 'config.json'))
        self.NFT_ABI_PATH = os.getenv('NFT_ABI_PATH', os.path.join(BASE_DIR, 'abis', 'NFT.json'))

        # None means no client-side timeout
        self.GENERATION_TIMEOUT = _optional_float('GENERATION_TIMEOUT')
        self.PINNING_TIMEOUT = _optional_float('PINNING_TIMEOUT')

        self.DEBUG = os.environ.get('FLASK_DEBUG', 'False').lower() == 'true'
        self.PORT = int(os.environ.get('PORT', 5000))

        for key, value in overrides.items():
            setattr(self, key, value)

    @property
    def network_name(self):
        return NETWORK_NAMES.get(self.SUPPORTED_CHAIN_ID, f'chain {self.SUPPORTED_CHAIN_ID}')

    def missing_keys(self):
        """Names of service credentials that are not configured."""
        required = ['HUGGING_FACE_API_KEY', 'PINATA_API_KEY', 'PINATA_SECRET_API_KEY', 'WALLET_RPC_URL']
        return [key for key in required if not getattr(self, key)]
