"""platstate — platform-state synchronization engine for an audio HAL."""

__version__ = "0.1.0"
