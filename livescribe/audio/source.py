"""AudioSource — abstract base for PCM16 mono capture sources."""
from abc import ABC, abstractmethod
from collections.abc import AsyncIterator


class AudioSource(ABC):
    @property
    @abstractmethod
    def sample_rate(self) -> int: ...

    @abstractmethod
    def chunks(self) -> AsyncIterator[bytes]:
        """Yield raw PCM16 mono buffers in capture order."""
        ...
