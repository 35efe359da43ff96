"""GitHub tag operations gateway.

This module provides the gateway for remote tag state: reading tag refs
and annotated tag objects, resolving refs to commits, and creating or
moving tag refs.

Import from submodules:
- abc: GitHubTagOps
- real: RealGitHubTagOps
- fake: FakeGitHubTagOps
- printing: PrintingGitHubTagOps
"""
