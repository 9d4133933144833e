"""Core domain package for minutes2gh.

Core contains reference parsing, fragment resolution, ownership filtering,
duplicate detection and the linking engine, without any Telegram or HTTP
client code, keeping the business logic portable.
"""
