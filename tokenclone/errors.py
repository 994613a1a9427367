"""Exceptions raised by tokenclone. Every failure is fatal to a run."""

from __future__ import annotations


class TokenCloneError(Exception):
    pass


class ConfigurationError(TokenCloneError):
    pass


class PrivateKeyError(TokenCloneError):
    pass


class JWTSigningError(TokenCloneError):
    pass


class InstallationError(TokenCloneError):
    pass


class TokenExchangeError(TokenCloneError):
    pass


class InvalidRepoURLError(TokenCloneError):
    pass


class RepositoryAccessError(TokenCloneError):
    def __init__(self, message: str, not_found: bool = False):
        super().__init__(message)
        self.not_found = not_found


class CloneError(TokenCloneError):
    pass
