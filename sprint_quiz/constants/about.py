"""Static metadata describing Knowledge Sprint."""

APP_NAME = "Knowledge Sprint"
APP_VERSION = "0.1"
APP_LICENSE = "MIT License"
APP_ABOUT_TEXT = (
    "Knowledge Sprint is a short event quiz. Visitors register, answer a randomized set of "
    "single- and multi-select questions, see feedback after each answer and get a scored recap."
)
