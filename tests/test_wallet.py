from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import MagicMock

import pytest

import wallet
from config import Config
from conftest import ACCOUNT, CONTRACT_ADDRESS


@pytest.fixture()
def config(tmp_path: Path) -> Config:
    book = tmp_path / "config.json"
    book.write_text(json.dumps({"656476": {"nft": {"address": CONTRACT_ADDRESS.lower()}}}))
    abi = tmp_path / "NFT.json"
    abi.write_text(json.dumps({"abi": [{"name": "cost", "type": "function", "inputs": [], "outputs": []}]}))
    return Config(
        WALLET_RPC_URL="http://wallet.test",
        PRIVATE_KEY=None,
        SUPPORTED_CHAIN_ID=656476,
        NFT_CONFIG_PATH=str(book),
        NFT_ABI_PATH=str(abi),
    )


def _web3(chain_id: int = 656476, connected: bool = True, accounts=None) -> MagicMock:
    w3 = MagicMock(name="web3")
    w3.is_connected.return_value = connected
    w3.eth.chain_id = chain_id
    w3.eth.accounts = [ACCOUNT] if accounts is None else accounts
    return w3


def test_supported_chain_binds_contract(config) -> None:
    w3 = _web3()

    session = wallet.load_session(config, web3_factory=lambda url: w3)

    assert session.can_mint
    assert session.account == ACCOUNT
    assert session.chain_id == 656476
    assert session.notice is None
    kwargs = w3.eth.contract.call_args.kwargs
    assert kwargs["address"] == CONTRACT_ADDRESS
    assert kwargs["abi"][0]["name"] == "cost"


def test_wrong_chain_leaves_contract_unset(config) -> None:
    session = wallet.load_session(config, web3_factory=lambda url: _web3(chain_id=1))

    assert not session.can_mint
    assert session.chain_id == 1
    assert session.notice == "Please connect to Open campus codex Sepolia network"


def test_missing_wallet_asks_for_one(config) -> None:
    config.WALLET_RPC_URL = None

    session = wallet.load_session(config, web3_factory=lambda url: pytest.fail("should not connect"))

    assert session.provider is None
    assert "configure a wallet provider" in session.notice


def test_unreachable_provider(config) -> None:
    session = wallet.load_session(config, web3_factory=lambda url: _web3(connected=False))

    assert not session.can_mint
    assert "not reachable" in session.notice


def test_missing_address_book_entry(config) -> None:
    Path(config.NFT_CONFIG_PATH).write_text("{}")

    session = wallet.load_session(config, web3_factory=lambda url: _web3())

    assert not session.can_mint
    assert session.notice.startswith("Error loading blockchain data:")


def test_private_key_account_wins(config) -> None:
    w3 = _web3(accounts=[])
    w3.eth.account.from_key.return_value.address = "0xSigner"
    config.PRIVATE_KEY = "0x" + "11" * 32

    session = wallet.load_session(config, web3_factory=lambda url: w3)

    assert session.account == "0xSigner"
    assert session.private_key == config.PRIVATE_KEY


def test_refresh_returns_new_context(config) -> None:
    first = wallet.load_session(config, web3_factory=lambda url: _web3(chain_id=1))

    second = wallet.refresh(first, config, web3_factory=lambda url: _web3())

    assert second is not first
    assert not first.can_mint and second.can_mint


@pytest.mark.parametrize(
    "wei, text",
    [(0, "0.0"), (10**16, "0.01"), (10**18, "1.0"), (25 * 10**18, "25.0"), (15 * 10**17, "1.5")],
)
def test_format_ether(wei: int, text: str) -> None:
    assert wallet.format_ether(wei) == text


def test_load_abi_accepts_bare_list(tmp_path: Path) -> None:
    path = tmp_path / "abi.json"
    path.write_text('[{"name": "mint"}]')

    assert wallet.load_abi(str(path)) == [{"name": "mint"}]
