import hashlib
from typing import BinaryIO

from .. import config


class FileHasher:
    def __init__(self, algorithm: str = config.HASH_ALGORITHM):
        self.algorithm = algorithm

    def hash_stream(self, stream: BinaryIO) -> str:
        """
        Consumes the stream from its current position to EOF and returns the
        hex digest. Read errors propagate to the caller.
        """
        h = hashlib.new(self.algorithm)
        while chunk := stream.read(config.HASH_CHUNK_SIZE):
            h.update(chunk)
        return h.hexdigest()
