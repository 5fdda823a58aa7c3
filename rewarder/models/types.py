from typing import Literal, Any

# type aliases for clarity
EthereumAddress = str
Bytes32 = str
DistributionId = Bytes32
GraphQL_Response = dict[Literal["data"], Any]

# sentinel returned while no root has ever been activated
NO_ROOT: Bytes32 = "0x" + "00" * 32
