import re
import uuid
from collections import Counter

from django.test import SimpleTestCase

from lessons.identifiers import (
    IDENTIFIER_RULES,
    SHORT_CODE_ALPHABET,
    compose_resource_url,
    extract_identifier,
    generate_short_code,
    is_short_code,
    is_uuid,
    match_rule,
    resolve_identifier,
    slugify_title,
)

SAMPLE_UUID = '38e4b033-467d-4ff9-a28e-d4aadb512f40'
SAMPLE_CODE = 'k5b8x2p9m1'

TITLES = [
    'Úvod do historie',
    'Žluťoučký kůň úpěl ďábelské ódy',
    'Lekce 42',
    '1234567890',
    'C++ vs. Rust',
    '  Hello   World  ',
    'Hello - World',
    'trailing hyphen -',
    '- leading hyphen',
    'tab\tand\nnewline',
    'under_score',
    '!!!',
    '',
    'İstanbul 1989',
    'Straße',
    'title-1234567890',
]


def segment_of(url):
    return url.split('/', 2)[2]


class ShortCodeGeneratorTest(SimpleTestCase):
    """Shape and distribution of generated short codes."""

    def test_shape(self):
        pattern = re.compile(r'^[a-z0-9]{10}$')
        for _ in range(1000):
            code = generate_short_code()
            self.assertRegex(code, pattern)
            self.assertTrue(is_short_code(code))

    def test_alphabet(self):
        self.assertEqual(len(SHORT_CODE_ALPHABET), 36)
        self.assertEqual(len(set(SHORT_CODE_ALPHABET)), 36)

    def test_codes_differ(self):
        codes = {generate_short_code() for _ in range(1000)}
        self.assertEqual(len(codes), 1000)

    def test_symbols_are_roughly_uniform(self):
        draws = 20000
        counts = Counter()
        for _ in range(draws):
            counts.update(generate_short_code())

        expected = draws * 10 / len(SHORT_CODE_ALPHABET)
        self.assertEqual(set(counts), set(SHORT_CODE_ALPHABET))
        for symbol, count in counts.items():
            self.assertLess(
                abs(count - expected) / expected, 0.1,
                f"symbol {symbol!r} drawn {count} times, expected about {expected:.0f}"
            )


class SlugifyTitleTest(SimpleTestCase):

    def test_strips_diacritics(self):
        self.assertEqual(slugify_title('Úvod do historie'), 'uvod-do-historie')
        self.assertEqual(
            slugify_title('Žluťoučký kůň úpěl ďábelské ódy'),
            'zlutoucky-kun-upel-dabelske-ody'
        )

    def test_removes_symbols(self):
        self.assertEqual(slugify_title('C++ vs. Rust'), 'c-vs-rust')

    def test_collapses_whitespace_and_hyphens(self):
        self.assertEqual(slugify_title('  Hello   World  '), 'hello-world')
        self.assertEqual(slugify_title('Hello - World'), 'hello-world')
        self.assertEqual(slugify_title('tab\tand\nnewline'), 'tab-and-newline')

    def test_keeps_underscores_and_digits(self):
        self.assertEqual(slugify_title('under_score 42'), 'under_score-42')

    def test_keeps_edge_hyphens_from_title(self):
        self.assertEqual(slugify_title('trailing hyphen -'), 'trailing-hyphen-')
        self.assertEqual(slugify_title('--- leading'), '-leading')

    def test_degenerate_titles(self):
        self.assertEqual(slugify_title('!!!'), '')
        self.assertEqual(slugify_title(''), '')
        self.assertEqual(slugify_title(None), '')

    def test_output_is_ascii(self):
        for title in TITLES:
            self.assertRegex(slugify_title(title), r'^[a-z0-9_-]*$')

    def test_idempotent(self):
        for title in TITLES:
            once = slugify_title(title)
            self.assertEqual(slugify_title(once), once, title)

    def test_pure(self):
        for title in TITLES:
            self.assertEqual(slugify_title(title), slugify_title(title))


class ComposeResourceUrlTest(SimpleTestCase):

    def test_prefers_short_code(self):
        self.assertEqual(
            compose_resource_url('lessons', 'Úvod do historie', SAMPLE_UUID, SAMPLE_CODE),
            '/lessons/uvod-do-historie-k5b8x2p9m1'
        )

    def test_falls_back_to_identifier(self):
        self.assertEqual(
            compose_resource_url('lessons', 'Úvod do historie', SAMPLE_UUID, None),
            f'/lessons/uvod-do-historie-{SAMPLE_UUID}'
        )
        self.assertEqual(
            compose_resource_url('lessons', 'Úvod do historie', SAMPLE_UUID, ''),
            f'/lessons/uvod-do-historie-{SAMPLE_UUID}'
        )

    def test_accepts_uuid_instances(self):
        self.assertEqual(
            compose_resource_url('lessons', 'Lekce', uuid.UUID(SAMPLE_UUID)),
            f'/lessons/lekce-{SAMPLE_UUID}'
        )

    def test_degenerate_title_keeps_leading_hyphen(self):
        self.assertEqual(
            compose_resource_url('lessons', '!!!', SAMPLE_UUID, SAMPLE_CODE),
            '/lessons/-k5b8x2p9m1'
        )


class ExtractIdentifierTest(SimpleTestCase):

    def test_short_code_suffix(self):
        self.assertEqual(extract_identifier('uvod-do-historie-k5b8x2p9m1'), SAMPLE_CODE)

    def test_uuid_suffix(self):
        self.assertEqual(extract_identifier(f'uvod-{SAMPLE_UUID}'), SAMPLE_UUID)

    def test_uuid_suffix_is_lowercased(self):
        self.assertEqual(extract_identifier(f'uvod-{SAMPLE_UUID.upper()}'), SAMPLE_UUID)

    def test_numeric_suffix(self):
        self.assertEqual(extract_identifier('lekce-42'), '42')

    def test_bare_short_code(self):
        self.assertEqual(extract_identifier(SAMPLE_CODE), SAMPLE_CODE)

    def test_bare_uuid(self):
        self.assertEqual(extract_identifier(SAMPLE_UUID), SAMPLE_UUID)

    def test_empty(self):
        self.assertEqual(extract_identifier(''), '')
        self.assertEqual(extract_identifier(None), '')

    def test_fallback_returns_input(self):
        self.assertEqual(extract_identifier('no-identifier-here'), 'no-identifier-here')
        self.assertEqual(extract_identifier('42'), '42')
        self.assertEqual(extract_identifier('abc-K5B8X2P9M1'), 'abc-K5B8X2P9M1')

    def test_ten_digit_suffix_is_a_short_code(self):
        self.assertEqual(resolve_identifier('lekce-1234567890'), ('short_code', '1234567890'))

    def test_longer_alphanumeric_suffix_is_not_a_short_code(self):
        # 12 characters: neither a short code nor numeric
        self.assertEqual(resolve_identifier('lekce-abcdef123456'), ('fallback', 'lekce-abcdef123456'))

    def test_short_code_needs_hyphen_or_start_before_it(self):
        self.assertEqual(resolve_identifier('abc12345678901'), ('fallback', 'abc12345678901'))
        self.assertEqual(extract_identifier('lekce-abc12345678901'), 'lekce-abc12345678901')
        self.assertEqual(extract_identifier('abc-2345678901'), '2345678901')

    def test_uuid_tail_is_not_mistaken_for_short_code(self):
        self.assertEqual(resolve_identifier(f'uvod-{SAMPLE_UUID}'), ('uuid', SAMPLE_UUID))

    def test_rule_order(self):
        self.assertEqual([name for name, _ in IDENTIFIER_RULES], ['short_code', 'uuid', 'numeric'])

    def test_match_rule_individually(self):
        self.assertEqual(match_rule('short_code', 'a-k5b8x2p9m1'), SAMPLE_CODE)
        self.assertIsNone(match_rule('short_code', 'lekce-42'))
        self.assertEqual(match_rule('uuid', f'x-{SAMPLE_UUID}'), SAMPLE_UUID)
        self.assertIsNone(match_rule('uuid', 'lekce-42'))
        self.assertEqual(match_rule('numeric', 'lekce-42'), '42')
        # on its own the numeric rule also matches the digit tail of a UUID
        self.assertEqual(match_rule('numeric', 'x-38e4b033-467d-4ff9-a28e-123456789012'), '123456789012')

    def test_match_rule_unknown_name(self):
        with self.assertRaises(KeyError):
            match_rule('slug', 'anything')


class RoundTripTest(SimpleTestCase):
    """Extracting from a freshly built URL gives back the identifier used."""

    def test_round_trip(self):
        identifier_pairs = [
            (SAMPLE_UUID, SAMPLE_CODE),
            (SAMPLE_UUID, None),
            (SAMPLE_UUID, ''),
            (str(uuid.uuid4()), '1234567890'),
            (str(uuid.uuid4()), 'abcdefghij'),
            (str(uuid.uuid4()), None),
        ] + [(str(uuid.uuid4()), generate_short_code()) for _ in range(50)]

        for title in TITLES:
            for identifier, short_code in identifier_pairs:
                url = compose_resource_url('lessons', title, identifier, short_code)
                self.assertEqual(
                    extract_identifier(segment_of(url)),
                    short_code or identifier,
                    url
                )


class ShapePredicateTest(SimpleTestCase):

    def test_is_uuid(self):
        self.assertTrue(is_uuid(SAMPLE_UUID))
        self.assertTrue(is_uuid(SAMPLE_UUID.upper()))
        self.assertTrue(is_uuid(uuid.UUID(SAMPLE_UUID)))
        self.assertFalse(is_uuid(SAMPLE_CODE))
        self.assertFalse(is_uuid(''))
        self.assertFalse(is_uuid(None))

    def test_is_short_code(self):
        self.assertTrue(is_short_code(SAMPLE_CODE))
        self.assertFalse(is_short_code('K5B8X2P9M1'))
        self.assertFalse(is_short_code('short'))
        self.assertFalse(is_short_code(None))
