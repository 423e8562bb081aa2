"""Generic constants shared by the deployment pipeline."""

# Precision constants
WAD = 10**18  # 18 decimal token amounts
PRECISION = 10**25  # One percent in the protocol's fixed-point representation
PERCENTAGE_100 = PRECISION * 100

# Address and key sentinels
ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"
ASSET_KEY_LENGTH = 32  # bytes32

# Revert fragments emitted by OpenZeppelin Initializable
ALREADY_INITIALIZED_REVERTS = (
    "already initialized",
    "InvalidInitialization",
)
