"""
Unified cross-exchange trading interface.

Exchange adapters live in ``unified_exchanges.exchanges``; runtime settings in
``unified_exchanges.config.settings``.
"""
