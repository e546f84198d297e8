"""Wallet access for Sonic networks.

Chain resolution by RPC URL, wei/decimal conversion, and a per-invocation
wallet manager built on eth-account and web3.
"""
