"""nftmarket: fixed-price NFT marketplace on an in-process development chain.

  - NftMarketplace: list, cancel, update, buy (payable), withdraw proceeds
  - BasicNft companion ERC-721 with per-token and operator approval
  - LocalChain host ledger: all-or-nothing transactions, gas, hash-chained blocks
  - Tagged deploy scripts and a front-end address publisher
  - Behavioural oracle: acceptance scenarios for any marketplace deployment
"""

__version__ = "0.1.0"
__description__ = "NFT marketplace reference contracts with deploy tooling and behaviour oracle"

from nftmarket.contracts import BasicNft, NftMarketplace
from nftmarket.core.chain import LocalChain
from nftmarket.deploy import run_deploy

__all__ = ["BasicNft", "LocalChain", "NftMarketplace", "run_deploy", "__version__"]
