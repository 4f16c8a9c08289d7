"""
eVoting Governance Engine Package

Core imports are lazily loaded so that importing the package does not
configure logging. For direct module access, import from submodules:

    from evoting.governance import GovernanceContract, CallContext
    from evoting.config import load_config
"""

__version__ = "1.0.0"


# Lazy imports to avoid loading everything at package import
def __getattr__(name):
    """Lazy module loading."""
    if name == 'GovernanceContract':
        from .governance import GovernanceContract
        return GovernanceContract
    elif name == 'CallContext':
        from .governance import CallContext
        return CallContext
    elif name == 'load_config':
        from .config import load_config
        return load_config
    raise AttributeError(f"module 'evoting' has no attribute {name!r}")

__all__ = ['GovernanceContract', 'CallContext', 'load_config']
