"""Developer machine onboarding."""
