"""Note-taking API with email OTP signup and Google sign-in."""

__version__ = "1.0.0"
