"""LearningGrowth API.

A REST façade over two smart contracts: a class-scheduling contract
(``ClassScheduler``) and an ERC20-like learning points token
(``LearningPointsToken``).

Core subpackages
----------------

- ``learninggrowth.chain``: provider and wallet factories, connection-options
  resolution, contract registry, ABI loading and argument coercion.
- ``learninggrowth.services``: one function per contract method, taking
  request-shaped values and returning Python data.
- ``learninggrowth.server``: the FastAPI application, request schemas,
  exception handlers and middleware.

Typical workflow
----------------

1. Configure ``BLOCKCHAIN_RPC_URL``, ``BLOCKCHAIN_PRIVATE_KEY`` and the two
   contract addresses.
2. Run ``learninggrowth-api`` (or ``python -m learninggrowth.server``).
3. Call ``/api/classes`` and ``/api/learning-points``.
"""

__version__ = "0.1.0"
