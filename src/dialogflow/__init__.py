"""Dialogflow agent support.

Converts between the neutral language model and a Dialogflow agent export (intents, entities and
their per-locale sample/entries files) in both directions.
"""
