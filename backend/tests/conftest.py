from __future__ import annotations

import base64
import sys
from pathlib import Path
from typing import Callable

import pytest

BACKEND = Path(__file__).resolve().parents[1]

if str(BACKEND) not in sys.path:
    sys.path.insert(0, str(BACKEND))

from Crypto.Cipher import AES  # noqa: E402
from Crypto.Util.Padding import pad  # noqa: E402

from gaana_api.link_decoder import LINK_IV, LINK_KEY  # noqa: E402


def encrypt_link(plaintext: str, offset: int = 3) -> str:
    ciphertext = AES.new(LINK_KEY, AES.MODE_CBC, iv=LINK_IV).encrypt(pad(plaintext.encode("utf-8"), AES.block_size))
    prefix = str(offset) + "q" * (offset + 15)
    return prefix + base64.b64encode(ciphertext).decode("ascii")


@pytest.fixture
def make_token() -> Callable[..., str]:
    return encrypt_link


@pytest.fixture
def tiers_for() -> Callable[[str], dict]:
    def build(url: str) -> dict:
        return {quality: {"message": encrypt_link(f"{url}/{quality}.m3u8")} for quality in ("auto", "high", "medium", "low")}

    return build
