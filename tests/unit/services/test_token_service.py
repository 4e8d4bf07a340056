import hashlib

from src.app.services.token_service import (
    TOKEN_LENGTH,
    generate_token,
    hash_token,
    is_well_formed_token,
)


def test_generated_tokens_are_64_hex_chars():
    token = generate_token()

    assert len(token) == TOKEN_LENGTH == 64
    assert all(c in "0123456789abcdef" for c in token)


def test_generated_tokens_do_not_repeat():
    tokens = {generate_token() for _ in range(10_000)}

    assert len(tokens) == 10_000


def test_hash_is_deterministic_sha256():
    token = generate_token()

    assert hash_token(token) == hash_token(token)
    assert hash_token(token) == hashlib.sha256(token.encode("utf-8")).hexdigest()
    assert len(hash_token(token)) == 64


def test_different_tokens_hash_differently():
    assert hash_token(generate_token()) != hash_token(generate_token())


def test_hash_never_equals_token():
    token = generate_token()

    assert hash_token(token) != token


def test_well_formed_token_check():
    assert is_well_formed_token(generate_token())
    assert not is_well_formed_token("")
    assert not is_well_formed_token("abc")
    assert not is_well_formed_token("z" * 64)
    assert not is_well_formed_token("a" * 63)


def test_token_with_embedded_whitespace_is_rejected():
    spaced = "ab " * 21 + "a"

    assert len(spaced) == TOKEN_LENGTH
    assert not is_well_formed_token(spaced)
    assert not is_well_formed_token(" " + generate_token()[1:])
