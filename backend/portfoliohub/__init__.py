"""
PortfolioHub backend: accounts, username registry and portfolio pages.
"""
