"""
# Paste-Transform: exceptions.py

Licensed under "MIT No Attribution" (MIT-0), see LICENSE.

Exception classes.
"""


class UnrecognisedIdException(Exception):
    _unrecognised_id: str

    def __init__(self, unrecognised_id: str):
        super().__init__(f'unrecognised id `{unrecognised_id}`')
        self._unrecognised_id = unrecognised_id

    @property
    def unrecognised_id(self) -> str:
        return self._unrecognised_id
