"""Blockchain connectivity for the LearningGrowth API.

Modules:
    provider_factory: read-only JSON-RPC connections and the shared provider.
    wallet_factory: local transaction signers and the shared wallet.
    contract_connector: connection-options resolution and read/write execution.
    contract_registry: named contract deployments.
    coercion: conversion of request values into ABI argument types.
    abi_loader: loading contract ABIs from JSON files.
    errors: the exception hierarchy shared by the modules above.
"""
