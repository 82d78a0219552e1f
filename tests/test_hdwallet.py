"""Tests for mnemonic handling, key derivation and address encoding."""

from unittest.mock import patch

import pytest

from ethwallet.hdwallet import (
    DERIVATION_PATH,
    DerivationError,
    InvalidMnemonicError,
    WalletRecord,
    generate_mnemonic,
    generate_wallet,
    get_derivation_path,
    import_wallet,
    is_valid_address,
    to_checksum_address,
    validate_mnemonic,
)

TEST_MNEMONIC = (
    "abandon abandon abandon abandon abandon abandon "
    "abandon abandon abandon abandon abandon about"
)
TEST_ADDRESS = "0x9858EfFD232B4033E47d90003D41EC34EcaEda94"
TEST_PRIVATE_KEY = "0x1ab42cc412b618bdea3a599e3c9bae199ebf030895b039e9db1e30dafb12b727"

TEST_MNEMONIC_24 = " ".join(["abandon"] * 23 + ["art"])

# EIP-55 reference addresses
CHECKSUM_VECTORS = [
    "0x5aAeb6053F3E94C9b9A09f33669435E7Ef1BeAed",
    "0xfB6916095ca1df60bB79Ce92cE3Ea74c37c5d359",
    "0xdbF03B407c01E7cD3CBea99509d93f8DDDC8C6FB",
    "0xD1220A0cf47c7B9Be7A2E6BA89F429762e7b9aDb",
]


class TestMnemonic:
    """Tests for mnemonic generation and validation."""

    def test_generate_12_words(self):
        """Test that the default mnemonic has 12 valid words."""
        mnemonic = generate_mnemonic()

        assert len(mnemonic.split()) == 12
        assert validate_mnemonic(mnemonic)

    def test_generate_24_words(self):
        """Test 256-bit mnemonic generation."""
        mnemonic = generate_mnemonic(24)

        assert len(mnemonic.split()) == 24
        assert validate_mnemonic(mnemonic)

    def test_generate_rejects_other_lengths(self):
        """Test that only 12 and 24 word phrases can be generated."""
        with pytest.raises(ValueError):
            generate_mnemonic(15)

    def test_generated_mnemonics_always_validate(self):
        """Test a batch of generated phrases."""
        for _ in range(25):
            assert validate_mnemonic(generate_mnemonic())

    def test_generated_mnemonics_differ(self):
        """Test that entropy is drawn fresh each time."""
        assert generate_mnemonic() != generate_mnemonic()

    def test_entropy_comes_from_secrets(self):
        """Test that generation uses the secrets CSPRNG."""
        with patch("ethwallet.hdwallet.eth.secrets.token_bytes", return_value=bytes(16)) as tb:
            mnemonic = generate_mnemonic()

        tb.assert_called_once_with(16)
        assert mnemonic == TEST_MNEMONIC

    def test_validate_known_phrases(self):
        """Test reference mnemonics."""
        assert validate_mnemonic(TEST_MNEMONIC)
        assert validate_mnemonic(TEST_MNEMONIC_24)

    def test_validate_substituted_word_fails_checksum(self):
        """Test that changing the checksum word invalidates the phrase."""
        words = TEST_MNEMONIC.split()
        for replacement in ("abandon", "above"):
            mutated = " ".join(words[:-1] + [replacement])
            assert not validate_mnemonic(mutated)

    def test_validate_unknown_word(self):
        """Test a word outside the BIP39 list."""
        words = TEST_MNEMONIC.split()
        words[3] = "bitcoinz"
        assert not validate_mnemonic(" ".join(words))

    @pytest.mark.parametrize("count", [0, 1, 11, 13, 23, 25])
    def test_validate_wrong_word_count(self, count):
        """Test that bad lengths are rejected."""
        assert not validate_mnemonic(" ".join(["abandon"] * count))

    @pytest.mark.parametrize("bad_input", ["", "   ", None, 12345, "abandon,about"])
    def test_validate_never_raises(self, bad_input):
        """Test malformed input returns False instead of raising."""
        assert validate_mnemonic(bad_input) is False

    def test_validate_is_case_and_whitespace_insensitive(self):
        """Test that normalization is applied before validation."""
        messy = "  " + TEST_MNEMONIC.upper().replace(" ", "   ") + "\n"
        assert validate_mnemonic(messy)


class TestKeyDerivation:
    """Tests for wallet import and generation."""

    def test_reference_vector(self):
        """Test the well-known address for the abandon...about mnemonic."""
        wallet = import_wallet(TEST_MNEMONIC)

        assert wallet.address == TEST_ADDRESS
        assert wallet.private_key == TEST_PRIVATE_KEY
        assert wallet.mnemonic == TEST_MNEMONIC

    def test_import_is_deterministic(self):
        """Test repeated imports yield identical key material."""
        for phrase in (TEST_MNEMONIC, TEST_MNEMONIC_24):
            first = import_wallet(phrase)
            second = import_wallet(phrase)

            assert first == second

    def test_24_word_import(self):
        """Test that 24-word phrases derive a distinct wallet."""
        wallet = import_wallet(TEST_MNEMONIC_24)

        assert is_valid_address(wallet.address)
        assert wallet.address != TEST_ADDRESS

    def test_import_keeps_phrase_verbatim(self):
        """Test uppercase input derives the same key but is returned as given."""
        phrase = TEST_MNEMONIC.upper()
        wallet = import_wallet(phrase)

        assert wallet.address == TEST_ADDRESS
        assert wallet.mnemonic == phrase

    def test_passphrase_changes_wallet(self):
        """Test that a BIP39 passphrase yields a different key."""
        plain = import_wallet(TEST_MNEMONIC)
        protected = import_wallet(TEST_MNEMONIC, passphrase="TREZOR")

        assert plain.address != protected.address
        assert "TREZOR" not in repr(protected)
        assert "TREZOR" not in str(protected.to_dict())

    def test_import_invalid_mnemonic(self):
        """Test that invalid phrases raise InvalidMnemonicError."""
        with pytest.raises(InvalidMnemonicError):
            import_wallet(" ".join(["abandon"] * 12))

    def test_invalid_mnemonic_is_value_error(self):
        """Test callers catching ValueError also see InvalidMnemonicError."""
        with pytest.raises(ValueError):
            import_wallet("not a mnemonic")

    def test_derivation_failure_is_wrapped(self):
        """Test unexpected faults surface as DerivationError."""
        with patch(
            "ethwallet.hdwallet.eth.Bip32Secp256k1.FromSeed",
            side_effect=RuntimeError("boom"),
        ):
            with pytest.raises(DerivationError) as exc_info:
                import_wallet(TEST_MNEMONIC)

        assert isinstance(exc_info.value.__cause__, RuntimeError)

    def test_generate_wallet(self):
        """Test that generated wallets re-import to the same key."""
        wallet = generate_wallet()

        assert validate_mnemonic(wallet.mnemonic)
        assert import_wallet(wallet.mnemonic) == wallet
        assert wallet.private_key.startswith("0x")
        assert len(wallet.private_key) == 66

    def test_derivation_path(self):
        """Test the fixed BIP44 path."""
        assert get_derivation_path() == "m/44'/60'/0'/0/0"
        assert DERIVATION_PATH == get_derivation_path()

    def test_record_repr_hides_secrets(self):
        """Test that the private key does not leak through repr."""
        wallet = import_wallet(TEST_MNEMONIC)

        assert TEST_PRIVATE_KEY not in repr(wallet)
        assert "abandon" not in repr(wallet)

    def test_record_dict_roundtrip(self):
        """Test serialization used by storage."""
        wallet = import_wallet(TEST_MNEMONIC)

        assert WalletRecord.from_dict(wallet.to_dict()) == wallet


class TestAddresses:
    """Tests for EIP-55 checksum encoding and address validation."""

    @pytest.mark.parametrize("address", CHECKSUM_VECTORS)
    def test_checksum_vectors(self, address):
        """Test reference vectors from lowercase and uppercase input."""
        assert to_checksum_address(address.lower()) == address
        assert to_checksum_address("0x" + address[2:].upper()) == address

    @pytest.mark.parametrize("address", CHECKSUM_VECTORS)
    def test_checksum_is_idempotent(self, address):
        """Test applying the checksum to its own output."""
        once = to_checksum_address(address.lower())
        assert to_checksum_address(once) == once

    def test_checksum_without_prefix(self):
        """Test bare 40-digit input gains the 0x prefix."""
        address = CHECKSUM_VECTORS[0]
        assert to_checksum_address(address[2:].lower()) == address

    @pytest.mark.parametrize(
        "bad_address",
        ["", "0x", "0x1234", "0x" + "g" * 40, "0x" + "a" * 41, None],
    )
    def test_checksum_rejects_invalid(self, bad_address):
        """Test that non-addresses raise ValueError."""
        with pytest.raises(ValueError):
            to_checksum_address(bad_address)

    @pytest.mark.parametrize("address", CHECKSUM_VECTORS)
    def test_valid_addresses(self, address):
        """Test checksummed, lowercase and uppercase forms are accepted."""
        assert is_valid_address(address)
        assert is_valid_address(address.lower())
        assert is_valid_address("0x" + address[2:].upper())

    def test_bad_checksum_rejected(self):
        """Test mixed case with a wrong checksum."""
        good = CHECKSUM_VECTORS[0]
        bad = good[:-1] + good[-1].swapcase()

        assert not is_valid_address(bad)

    @pytest.mark.parametrize(
        "bad_address",
        ["", "0x1234", "0x" + "z" * 40, "0x" + "a" * 39, None, 42, b"\x00" * 20],
    )
    def test_invalid_addresses(self, bad_address):
        """Test that malformed input returns False."""
        assert is_valid_address(bad_address) is False
