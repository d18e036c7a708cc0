"""
gitscribe: AI-generated commit messages for git.

Layers:
    - providers: Static registry of supported AI providers
    - config: Persisted YAML configuration and the keychain-backed API key
    - hooks: Installation of the git hooks that call ``gitscribe --hook``
    - wizard/: Interactive setup (full-screen TUI and prompt fallback)
    - cli/: Click commands and Rich formatting helpers
"""

__version__ = "0.4.0"
