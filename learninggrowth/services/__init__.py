"""Contract services.

``class_scheduler`` and ``learning_points_token`` expose one coroutine per
contract method. Route handlers call these; they never touch web3 directly.
"""
