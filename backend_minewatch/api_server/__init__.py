"""
API server package: HTTP/REST interface.

Exposes pool statistics, market data, advisor recommendations and mining
account management to the dashboard. Delegates to the service objects built
in container.build_services().
"""
