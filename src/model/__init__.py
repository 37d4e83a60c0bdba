"""Neutral language model.

The platform-agnostic representation of intents, phrases, inputs and input types, plus the merge
helpers used to combine model files with project overrides.
"""
