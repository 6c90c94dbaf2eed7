"""NextGen MedPrep API: subscriptions and tier-gated resource downloads."""
