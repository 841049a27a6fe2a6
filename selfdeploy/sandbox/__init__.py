"""Repository checkout for analysis of remote URLs."""

from selfdeploy.sandbox.checkout import CloneError, SandboxError, clone_repo, cloned_repo

__all__ = ["CloneError", "SandboxError", "clone_repo", "cloned_repo"]
