"""
Transaction Signer - handles transaction signing.

Turns a wallet identity into an Ed25519 account and signs raw transactions
on its behalf.
"""

import structlog

from aptos_sdk import ed25519
from aptos_sdk.account import Account
from aptos_sdk.account_address import AccountAddress
from aptos_sdk.authenticator import Authenticator, Ed25519Authenticator
from aptos_sdk.transactions import RawTransaction, SignedTransaction

from marketplace.core.identity import WalletIdentity
from marketplace.exceptions import SigningError

logger = structlog.get_logger(__name__)


def parse_address(address: str) -> AccountAddress:
    """Parse a hex account address, raising SigningError when malformed."""
    try:
        return AccountAddress.from_str(address)
    except Exception as e:
        raise SigningError(f"Invalid account address {address!r}: {e}")


class TransactionSigner:
    """
    Signs transactions with a wallet identity's key.

    Key material is parsed on every call and never cached, so identities stay
    plain values. The public key is derived from the private key; whether it
    belongs to the identity's address is decided by the network.
    """

    def account_for(self, identity: WalletIdentity) -> Account:
        """
        Build an SDK account from an identity.

        Args:
            identity: Wallet to load

        Returns:
            Account bound to the identity's address and private key

        Raises:
            SigningError: If the address or private key is malformed
        """
        address = parse_address(identity.address)
        try:
            private_key = ed25519.PrivateKey.from_str(identity.private_key)
        except Exception as e:
            raise SigningError(f"Invalid private key for {identity.label} wallet: {e}")

        return Account(address, private_key)

    def sign_transaction(
        self,
        identity: WalletIdentity,
        raw_transaction: RawTransaction,
    ) -> SignedTransaction:
        """
        Sign a raw transaction.

        Args:
            identity: Wallet signing the transaction
            raw_transaction: Transaction generated by the node

        Returns:
            Signed transaction
        """
        account = self.account_for(identity)

        try:
            signature = account.sign(raw_transaction.keyed())
        except Exception as e:
            raise SigningError(f"Failed to sign transaction for {identity.label} wallet: {e}")

        authenticator = Authenticator(
            Ed25519Authenticator(account.public_key(), signature)
        )

        logger.debug(
            "transaction_signed",
            label=identity.label,
            sender=identity.short_address,
            sequence_number=raw_transaction.sequence_number,
        )

        return SignedTransaction(raw_transaction, authenticator)
