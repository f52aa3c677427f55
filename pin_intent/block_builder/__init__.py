"""Bid-collection sessions, winner selection and the block builder for broadcast intents."""