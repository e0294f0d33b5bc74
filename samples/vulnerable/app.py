"""Intentionally vulnerable module used for scanner demos."""

import pickle


def load_profile(blob):
    return pickle.loads(blob)


def calculate(expression):
    return eval(expression)
