from .word_generator import generate_random_words, gen_words_with_prefix_freq, make_typos
from .ip_generator import IPConfig, IPGenerator


class WorkLoad:
    def __init__(self, seed=None):
        self.seed = seed

    def words(self, num_words, p_freq=0, unique=False):
        if p_freq > 0:
            return gen_words_with_prefix_freq(num_words, p_freq, self.seed, unique)
        else:
            return generate_random_words(num_words, self.seed, unique)

    def typos(self, words, max_edits=1):
        return make_typos(words, max_edits, self.seed)

    def ips(self, num_ips):
        return IPGenerator(IPConfig(seed=self.seed)).batch(num_ips)

    def routes(self, num_routes):
        return IPGenerator(IPConfig(seed=self.seed)).route_prefixes(num_routes)
