"""HR Employee Connect: onboarding touchpoints and issue tracking."""
