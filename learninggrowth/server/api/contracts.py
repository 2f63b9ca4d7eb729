"""
Contract Registry Endpoints.

Lists the contracts registered at startup, so clients can discover which
addresses and networks the server talks to.
"""

from typing import List

from fastapi import APIRouter

from learninggrowth.chain import contract_registry
from learninggrowth.server.schemas import ApiResponse, ContractInfo

from .responses import success

router = APIRouter()


@router.get(
    "",
    response_model=ApiResponse[List[ContractInfo]],
    summary="List Registered Contracts",
    description="Retrieve the contracts registered in the server's contract registry.",
    response_description="Registered contracts with their address and network.",
)
async def list_registered_contracts():
    contracts = [
        ContractInfo(name=config.name, address=config.address, chain_id=config.chain_id, rpc_url=config.rpc_url)
        for config in contract_registry.list_contracts()
    ]
    return success(contracts)
