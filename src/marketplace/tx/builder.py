"""
Transaction Builder - constructs marketplace entry function payloads.

Collection and token creation go through the SDK's token helpers; the two
marketplace functions below have no helper and are built here.
"""

from typing import Optional

import structlog

from marketplace.config import MarketplaceConfig, get_config
from marketplace.core.assets import CollectionDescriptor, TokenDescriptor
from marketplace.core.identity import WalletIdentity
from marketplace.core.payload import BuyTokenArgs, EntryFunctionCall, ListNftArgs

logger = structlog.get_logger(__name__)

MARKETPLACE_MODULE = "marketplace"
LIST_NFT_FUNCTION = "list_nft"
BUY_TOKEN_FUNCTION = "buy_token"


class MarketplacePayloadBuilder:
    """
    Builds payloads for the deployed marketplace module.

    Every payload is priced in the configured coin type, which is passed as
    the only type argument.
    """

    def __init__(self, config: Optional[MarketplaceConfig] = None):
        """
        Initialize the payload builder.

        Args:
            config: Marketplace configuration
        """
        self.config = config or get_config()

    def function_id(self, function: str) -> str:
        """Fully qualified id of a marketplace function."""
        return f"{self.config.marketplace_address}::{MARKETPLACE_MODULE}::{function}"

    def list_nft(
        self,
        seller: WalletIdentity,
        collection: CollectionDescriptor,
        token: TokenDescriptor,
        price: Optional[int] = None,
        expiration: Optional[int] = None,
        property_version: Optional[int] = None,
    ) -> EntryFunctionCall:
        """
        Build a ``list_nft`` call.

        Args:
            seller: Owner of the token
            collection: Collection the token belongs to
            token: Token being listed
            price: Listing price (configured default if omitted)
            expiration: Listing expiration (configured default if omitted)
            property_version: Token property version (configured default if omitted)

        Returns:
            Entry function call with six arguments
        """
        args = ListNftArgs(
            seller=seller.address,
            collection_name=collection.name,
            token_name=token.name,
            price=self.config.list_price if price is None else price,
            expiration=self.config.list_expiration if expiration is None else expiration,
            property_version=(
                self.config.property_version if property_version is None else property_version
            ),
        )
        return self._build(LIST_NFT_FUNCTION, args.to_arguments())

    def buy_token(
        self,
        seller: WalletIdentity,
        buyer: WalletIdentity,
        collection: CollectionDescriptor,
        token: TokenDescriptor,
        property_version: Optional[int] = None,
    ) -> EntryFunctionCall:
        """
        Build a ``buy_token`` call.

        Args:
            seller: Wallet that listed the token
            buyer: Wallet purchasing the token
            collection: Collection the token belongs to
            token: Token being bought
            property_version: Token property version (configured default if omitted)

        Returns:
            Entry function call with five arguments
        """
        args = BuyTokenArgs(
            seller=seller.address,
            buyer=buyer.address,
            collection_name=collection.name,
            token_name=token.name,
            property_version=(
                self.config.property_version if property_version is None else property_version
            ),
        )
        return self._build(BUY_TOKEN_FUNCTION, args.to_arguments())

    def _build(self, function: str, arguments: tuple) -> EntryFunctionCall:
        call = EntryFunctionCall(
            function=self.function_id(function),
            type_arguments=(self.config.coin_type,),
            arguments=arguments,
        )
        logger.debug(
            "payload_built",
            function=function,
            argument_count=len(arguments),
            payload=call.to_dict(),
        )
        return call
