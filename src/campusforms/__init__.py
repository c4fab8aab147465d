"""Campus forms: validation and derived-state engine for sign-in, sign-up and event request forms."""
