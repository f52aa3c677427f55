"""Shared intent types, errors, constants, validators, configuration, metrics and helpers."""