import json
import logging
from decimal import Decimal

from web3 import Web3

from models import SessionContext

logger = logging.getLogger(__name__)


def format_ether(amount_wei):
    """Render a wei amount the way wallets do, e.g. 0.01."""
    value = Decimal(Web3.from_wei(amount_wei, 'ether'))
    text = format(value.normalize(), 'f')
    return text if '.' in text else f'{text}.0'


def load_abi(path):
    with open(path, 'r') as f:
        artifact = json.load(f)
    # Accept either a bare ABI list or a compiler artifact with an "abi" key
    if isinstance(artifact, dict):
        return artifact['abi']
    return artifact


def load_address_book(path):
    with open(path, 'r') as f:
        return json.load(f)


def contract_address_for(address_book, chain_id):
    entry = address_book.get(str(chain_id)) or {}
    address = entry.get('nft', {}).get('address')
    if not address:
        raise KeyError(f'No NFT contract address configured for chain {chain_id}')
    return Web3.to_checksum_address(address)


def resolve_account(w3, private_key=None):
    """Signing account: the configured key, else the first wallet-managed account."""
    if private_key:
        return w3.eth.account.from_key(private_key).address
    accounts = w3.eth.accounts
    if accounts:
        return accounts[0]
    return None


def _default_web3(rpc_url):
    return Web3(Web3.HTTPProvider(rpc_url))


def load_session(config, web3_factory=None, log=None):
    """
    Build a fresh SessionContext for the configured wallet provider.

    The contract handle is only bound when the provider reports the
    supported chain id.
    """
    log = log or logger
    web3_factory = web3_factory or _default_web3

    if not config.WALLET_RPC_URL:
        log.warning('No wallet provider configured')
        return SessionContext(notice='Please configure a wallet provider (WALLET_RPC_URL)')

    try:
        w3 = web3_factory(config.WALLET_RPC_URL)
        if not w3.is_connected():
            log.warning(f'Wallet provider at {config.WALLET_RPC_URL} is not reachable')
            return SessionContext(notice='Wallet provider is not reachable. Please check your wallet.')

        chain_id = w3.eth.chain_id
        account = resolve_account(w3, config.PRIVATE_KEY)

        if chain_id != config.SUPPORTED_CHAIN_ID:
            log.warning(f'Connected to unsupported chain {chain_id}')
            return SessionContext(
                provider=w3,
                account=account,
                chain_id=chain_id,
                private_key=config.PRIVATE_KEY,
                notice=f'Please connect to {config.network_name} network',
            )

        address = contract_address_for(load_address_book(config.NFT_CONFIG_PATH), chain_id)
        contract = w3.eth.contract(address=address, abi=load_abi(config.NFT_ABI_PATH))
        log.info(f'Session bound to NFT contract {address} on chain {chain_id} for account {account}')

        return SessionContext(
            provider=w3,
            account=account,
            chain_id=chain_id,
            contract=contract,
            private_key=config.PRIVATE_KEY,
        )
    except Exception as e:
        log.error(f'Error loading blockchain data: {str(e)}')
        return SessionContext(notice=f'Error loading blockchain data: {str(e)}')


def refresh(session, config, web3_factory=None, log=None):
    """Re-derive the session after a wallet account or network change."""
    previous = session.chain_id if session else None
    new_session = load_session(config, web3_factory=web3_factory, log=log)
    if new_session.chain_id != previous:
        (log or logger).info(f'Wallet network changed from {previous} to {new_session.chain_id}')
    return new_session
