import logging

from web3 import Web3

from models import ErrorKind, StageResult
from wallet import format_ether

logger = logging.getLogger(__name__)

USER_REJECTED_CODE = 4001


def _rpc_error(error):
    """Pull the JSON-RPC error object out of whatever web3 raised, if any."""
    response = getattr(error, 'rpc_response', None)
    if isinstance(response, dict) and isinstance(response.get('error'), dict):
        return response['error']
    if error.args and isinstance(error.args[0], dict):
        return error.args[0]
    return {}


def classify_error(error):
    """Map an exception raised while minting to a user-facing failure."""
    rpc_error = _rpc_error(error)
    code = rpc_error.get('code', getattr(error, 'code', None))
    text = str(rpc_error.get('message') or error)
    lowered = text.lower()

    if code == 'INSUFFICIENT_FUNDS' or 'insufficient funds' in lowered:
        return StageResult.failure(
            ErrorKind.INSUFFICIENT_FUNDS,
            'Mint failed: Insufficient funds. Please top up your wallet.',
            text
        )
    if code == USER_REJECTED_CODE or 'user rejected' in lowered or 'user denied' in lowered:
        return StageResult.failure(ErrorKind.REJECTED, 'Minting cancelled by user.', text)
    return StageResult.failure(ErrorKind.TRANSACTION, f'Mint failed: {text}', text)


class NFTMinter:
    def __init__(self, currency='ETH', log=None):
        self.currency = currency
        self.log = log or logger

    def mint(self, session, token_uri):
        """Pay the contract's cost and mint token_uri; returns the tx hash."""
        if session.contract is None or session.provider is None:
            return StageResult.failure(
                ErrorKind.CONNECTIVITY,
                'Mint failed: NFT contract not loaded. Please check your network connection.'
            )
        if not session.account:
            return StageResult.failure(ErrorKind.CONNECTIVITY, 'Mint failed: Please connect your wallet first.')

        w3 = session.provider
        contract = session.contract
        try:
            balance = w3.eth.get_balance(session.account)
            cost = contract.functions.cost().call()

            self.log.info(f'Minting cost: {format_ether(cost)} {self.currency}')
            self.log.info(f'User balance: {format_ether(balance)} {self.currency}')

            if balance < cost:
                return StageResult.failure(
                    ErrorKind.INSUFFICIENT_FUNDS,
                    f'Mint failed: Insufficient funds. You need at least {format_ether(cost)} {self.currency} to mint.'
                )

            tx_hash = self._send(session, token_uri, cost)
            receipt = w3.eth.wait_for_transaction_receipt(tx_hash)
            if receipt['status'] != 1:
                raise Exception('Transaction failed on-chain')

            tx_hash_hex = Web3.to_hex(tx_hash)
            self.log.info(f'Minting successful, transaction hash: {tx_hash_hex}')
            return StageResult.success(tx_hash_hex)
        except Exception as e:
            self.log.error(f'Error minting NFT: {str(e)}')
            return classify_error(e)

    def _send(self, session, token_uri, cost):
        w3 = session.provider
        mint_call = session.contract.functions.mint(token_uri)

        if not session.private_key:
            # The wallet provider holds the account and signs for it
            return mint_call.transact({'from': session.account, 'value': cost})

        mint_txn = mint_call.build_transaction({
            'from': session.account,
            'value': cost,
            'chainId': session.chain_id,
            'nonce': w3.eth.get_transaction_count(session.account, 'pending'),
        })
        signed_txn = w3.eth.account.sign_transaction(mint_txn, session.private_key)
        tx_hash = w3.eth.send_raw_transaction(signed_txn.raw_transaction)
        self.log.info(f'Mint transaction sent with hash: {Web3.to_hex(tx_hash)}')
        return tx_hash
