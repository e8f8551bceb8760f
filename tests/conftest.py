from __future__ import annotations

import io
import json
from pathlib import Path
import sys
from unittest.mock import MagicMock

import pytest
import requests
from PIL import Image

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from models import SessionContext

ACCOUNT = "0x90F8bf6A479f320ead074411a4B0e7944Ea8c9C1"
CONTRACT_ADDRESS = "0x5FbDB2315678afecb367f032d93F642f64180aa3"


class FakeResponse:
    def __init__(self, status_code: int = 200, body: dict | None = None,
                 content: bytes = b"", headers: dict | None = None):
        self.status_code = status_code
        self._body = body if body is not None else {}
        self.content = content
        self.headers = headers or {}
        self.text = json.dumps(self._body)

    @property
    def ok(self) -> bool:
        return self.status_code < 400

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Error", response=self)

    def json(self) -> dict:
        return self._body


def make_png() -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", (8, 8), color=(200, 40, 90)).save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.fixture()
def png_bytes() -> bytes:
    return make_png()


@pytest.fixture()
def chain() -> MagicMock:
    """A web3 stand-in with a funded account and a 0.01 ETH mint cost."""
    w3 = MagicMock(name="web3")
    w3.eth.get_balance.return_value = 10**18
    w3.eth.wait_for_transaction_receipt.return_value = {"status": 1}
    return w3


@pytest.fixture()
def contract() -> MagicMock:
    nft = MagicMock(name="nft")
    nft.address = CONTRACT_ADDRESS
    nft.functions.cost.return_value.call.return_value = 10**16
    nft.functions.mint.return_value.transact.return_value = b"\x12" * 32
    return nft


@pytest.fixture()
def session(chain: MagicMock, contract: MagicMock) -> SessionContext:
    return SessionContext(provider=chain, account=ACCOUNT, chain_id=656476, contract=contract)
