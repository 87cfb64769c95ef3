from .click import PolicyCardClick, PolicyCardClickCount

__all__ = ["PolicyCardClick", "PolicyCardClickCount"]
