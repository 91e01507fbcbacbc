import ipaddress
import random
from typing import Dict, Optional, List, Tuple
from dataclasses import dataclass
from faker import Faker

## === Config Class === ##

@dataclass
class IPConfig:
    """
    Configuration for IPGenerator
        public_share: float, proportion of public IPs
        private_weights: dict, weights for private IPs {a: x, b: x, c: x}
        min_prefix_len: int, shortest routing prefix in bits
        max_prefix_len: int, longest routing prefix in bits
        seed: int, seed for random number generator
    """
    public_share: float = 0.9  # fraction of public IPs
    private_weights: Optional[Dict[str, float]] = None  # weights for {'a','b','c'}
    min_prefix_len: int = 8
    max_prefix_len: int = 24
    seed: Optional[int] = None  # seed for random number generator

    def __post_init__(self):
        if not 0.0 <= self.public_share <= 1.0:
            raise ValueError("public_share must be between 0 and 1")
        if not 1 <= self.min_prefix_len <= self.max_prefix_len <= 32:
            raise ValueError("prefix lengths must satisfy 1 <= min <= max <= 32")
        if self.private_weights is None:
            self.private_weights = {'a': 0.35, 'b': 0.10, 'c': 0.55}
        else:
            missing = [k for k in ('a','b','c') if k not in self.private_weights]
            if missing:
                raise ValueError(f"private_weights missing keys: {missing}")
            if any(self.private_weights[k] < 0 for k in ('a','b','c')):
                raise ValueError("private_weights must be non-negative")
            if sum(self.private_weights[k] for k in ('a','b','c')) == 0:
                raise ValueError("Sum of private_weights must be > 0")
            srtd = {cls: self.private_weights[cls] for cls in sorted(self.private_weights.keys())}
            self.private_weights = srtd


def to_bits(ip: str) -> str:
    """Dotted IPv4 address -> 32-character binary key, most significant bit first."""
    return format(int(ipaddress.IPv4Address(ip)), "032b")


def to_octets(ip: str) -> Tuple[int, ...]:
    """Dotted IPv4 address -> tuple of four octets, for tries keyed by integers."""
    return tuple(ipaddress.IPv4Address(ip).packed)


class IPGenerator:
    def __init__(self, config: IPConfig):
        self.config = config
        self.rng = random.Random(self.config.seed)

        self.fake = Faker()
        if self.config.seed is not None:
            self.fake.seed_instance(self.config.seed)
        self.priv_classes, self.weights = zip(*self.config.private_weights.items())

    def _priv_class(self):
        return self.rng.choices(self.priv_classes, weights=self.weights, k=1)[0]

    def single(self) -> str:
        if self.rng.random() > self.config.public_share:
            cls = self._priv_class()
            return self.fake.ipv4_private(address_class=cls)
        else:
            return self.fake.ipv4_public()

    def batch(self, n) -> List[str]:
        if n <= 0:
            raise ValueError("n must be positive")
        return [self.single() for _ in range(n)]

    def bit_keys(self, n) -> List[str]:
        """Full 32-bit binary keys for `n` addresses."""
        return [to_bits(ip) for ip in self.batch(n)]

    def route_prefixes(self, n) -> List[str]:
        """Binary routing prefixes (CIDR network bits) of random length."""
        lo, hi = self.config.min_prefix_len, self.config.max_prefix_len
        return [bits[:self.rng.randint(lo, hi)] for bits in self.bit_keys(n)]
