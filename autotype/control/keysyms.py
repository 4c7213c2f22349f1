"""Unicode code point to X11 keysym translation.

Maps caller-supplied characters onto keysyms the X server understands:
Latin-1 maps to itself, a few control characters map to named function
keysyms, a table covers the legacy (pre-Unicode) keysym blocks, and
everything else uses the 0x01000000 Unicode keysym encoding.
"""

import logging
from typing import Iterable, Optional

from Xlib import XK

logger = logging.getLogger(__name__)

# Constants live in optional keysym groups that XK does not load by default
XK.load_keysym_group("xkb")

NO_SYMBOL = 0

# Caller-side sentinel: never typed, never reported as a failure
VERTICAL_TAB = 0x0B

# Highest valid Unicode scalar value
MAX_CODE_POINT = 0x10FFFF

# Keysyms for characters outside Latin-1 that have no legacy keysym
UNICODE_KEYSYM_FLAG = 0x01000000

# Keysym groups consulted when naming a keysym in error messages
_NAMED_GROUPS = (
    "latin2", "latin3", "latin4", "katakana", "arabic", "cyrillic",
    "greek", "technical", "special", "publishing", "apl", "hebrew",
    "thai", "korean", "xkb",
)

# Legacy keysyms python-xlib has no constant for
_EXTRA_NAMES: dict[int, str] = {
    0x6AD: "Ukrainian_ghe_with_upturn",
    0x6BD: "Ukrainian_GHE_WITH_UPTURN",
    0xAD5: "permille",
    0x13BC: "OE",
    0x13BD: "oe",
    0x13BE: "Ydiaeresis",
    0x20AC: "EuroSign",
}

CONTROL_KEYSYMS: dict[int, int] = {
    0x09: XK.XK_Tab,
    0x0D: XK.XK_Return,
    0x0A: XK.XK_Linefeed,
    0x08: XK.XK_BackSpace,
    0x7F: XK.XK_Delete,
    0x1B: XK.XK_Escape,
}


# Legacy (pre-Unicode) keysym -> UCS code point, from the X.Org keysym
# definitions. Where several keysyms share a code point, only the lowest
# keysym is listed.
LEGACY_KEYSYMS: dict[int, int] = {
    # Latin-2
    0x1A1: 0x0104, 0x1A2: 0x02D8, 0x1A3: 0x0141, 0x1A5: 0x013D,
    0x1A6: 0x015A, 0x1A9: 0x0160, 0x1AA: 0x015E, 0x1AB: 0x0164,
    0x1AC: 0x0179, 0x1AE: 0x017D, 0x1AF: 0x017B, 0x1B1: 0x0105,
    0x1B2: 0x02DB, 0x1B3: 0x0142, 0x1B5: 0x013E, 0x1B6: 0x015B,
    0x1B7: 0x02C7, 0x1B9: 0x0161, 0x1BA: 0x015F, 0x1BB: 0x0165,
    0x1BC: 0x017A, 0x1BD: 0x02DD, 0x1BE: 0x017E, 0x1BF: 0x017C,
    0x1C0: 0x0154, 0x1C3: 0x0102, 0x1C5: 0x0139, 0x1C6: 0x0106,
    0x1C8: 0x010C, 0x1CA: 0x0118, 0x1CC: 0x011A, 0x1CF: 0x010E,
    0x1D0: 0x0110, 0x1D1: 0x0143, 0x1D2: 0x0147, 0x1D5: 0x0150,
    0x1D8: 0x0158, 0x1D9: 0x016E, 0x1DB: 0x0170, 0x1DE: 0x0162,
    0x1E0: 0x0155, 0x1E3: 0x0103, 0x1E5: 0x013A, 0x1E6: 0x0107,
    0x1E8: 0x010D, 0x1EA: 0x0119, 0x1EC: 0x011B, 0x1EF: 0x010F,
    0x1F0: 0x0111, 0x1F1: 0x0144, 0x1F2: 0x0148, 0x1F5: 0x0151,
    0x1F8: 0x0159, 0x1F9: 0x016F, 0x1FB: 0x0171, 0x1FE: 0x0163,
    0x1FF: 0x02D9,

    # Latin-3
    0x2A1: 0x0126, 0x2A6: 0x0124, 0x2A9: 0x0130, 0x2AB: 0x011E,
    0x2AC: 0x0134, 0x2B1: 0x0127, 0x2B6: 0x0125, 0x2B9: 0x0131,
    0x2BB: 0x011F, 0x2BC: 0x0135, 0x2C5: 0x010A, 0x2C6: 0x0108,
    0x2D5: 0x0120, 0x2D8: 0x011C, 0x2DD: 0x016C, 0x2DE: 0x015C,
    0x2E5: 0x010B, 0x2E6: 0x0109, 0x2F5: 0x0121, 0x2F8: 0x011D,
    0x2FD: 0x016D, 0x2FE: 0x015D,

    # Latin-4
    0x3A2: 0x0138, 0x3A3: 0x0156, 0x3A5: 0x0128, 0x3A6: 0x013B,
    0x3AA: 0x0112, 0x3AB: 0x0122, 0x3AC: 0x0166, 0x3B3: 0x0157,
    0x3B5: 0x0129, 0x3B6: 0x013C, 0x3BA: 0x0113, 0x3BB: 0x0123,
    0x3BC: 0x0167, 0x3BD: 0x014A, 0x3BF: 0x014B, 0x3C0: 0x0100,
    0x3C7: 0x012E, 0x3CC: 0x0116, 0x3CF: 0x012A, 0x3D1: 0x0145,
    0x3D2: 0x014C, 0x3D3: 0x0136, 0x3D9: 0x0172, 0x3DD: 0x0168,
    0x3DE: 0x016A, 0x3E0: 0x0101, 0x3E7: 0x012F, 0x3EC: 0x0117,
    0x3EF: 0x012B, 0x3F1: 0x0146, 0x3F2: 0x014D, 0x3F3: 0x0137,
    0x3F9: 0x0173, 0x3FD: 0x0169, 0x3FE: 0x016B,

    # Katakana
    0x47E: 0x203E, 0x4A1: 0x3002, 0x4A2: 0x300C, 0x4A3: 0x300D,
    0x4A4: 0x3001, 0x4A5: 0x30FB, 0x4A6: 0x30F2, 0x4A7: 0x30A1,
    0x4A8: 0x30A3, 0x4A9: 0x30A5, 0x4AA: 0x30A7, 0x4AB: 0x30A9,
    0x4AC: 0x30E3, 0x4AD: 0x30E5, 0x4AE: 0x30E7, 0x4AF: 0x30C3,
    0x4B0: 0x30FC, 0x4B1: 0x30A2, 0x4B2: 0x30A4, 0x4B3: 0x30A6,
    0x4B4: 0x30A8, 0x4B5: 0x30AA, 0x4B6: 0x30AB, 0x4B7: 0x30AD,
    0x4B8: 0x30AF, 0x4B9: 0x30B1, 0x4BA: 0x30B3, 0x4BB: 0x30B5,
    0x4BC: 0x30B7, 0x4BD: 0x30B9, 0x4BE: 0x30BB, 0x4BF: 0x30BD,
    0x4C0: 0x30BF, 0x4C1: 0x30C1, 0x4C2: 0x30C4, 0x4C3: 0x30C6,
    0x4C4: 0x30C8, 0x4C5: 0x30CA, 0x4C6: 0x30CB, 0x4C7: 0x30CC,
    0x4C8: 0x30CD, 0x4C9: 0x30CE, 0x4CA: 0x30CF, 0x4CB: 0x30D2,
    0x4CC: 0x30D5, 0x4CD: 0x30D8, 0x4CE: 0x30DB, 0x4CF: 0x30DE,
    0x4D0: 0x30DF, 0x4D1: 0x30E0, 0x4D2: 0x30E1, 0x4D3: 0x30E2,
    0x4D4: 0x30E4, 0x4D5: 0x30E6, 0x4D6: 0x30E8, 0x4D7: 0x30E9,
    0x4D8: 0x30EA, 0x4D9: 0x30EB, 0x4DA: 0x30EC, 0x4DB: 0x30ED,
    0x4DC: 0x30EF, 0x4DD: 0x30F3, 0x4DE: 0x309B, 0x4DF: 0x309C,

    # Arabic
    0x5AC: 0x060C, 0x5BB: 0x061B, 0x5BF: 0x061F, 0x5C1: 0x0621,
    0x5C2: 0x0622, 0x5C3: 0x0623, 0x5C4: 0x0624, 0x5C5: 0x0625,
    0x5C6: 0x0626, 0x5C7: 0x0627, 0x5C8: 0x0628, 0x5C9: 0x0629,
    0x5CA: 0x062A, 0x5CB: 0x062B, 0x5CC: 0x062C, 0x5CD: 0x062D,
    0x5CE: 0x062E, 0x5CF: 0x062F, 0x5D0: 0x0630, 0x5D1: 0x0631,
    0x5D2: 0x0632, 0x5D3: 0x0633, 0x5D4: 0x0634, 0x5D5: 0x0635,
    0x5D6: 0x0636, 0x5D7: 0x0637, 0x5D8: 0x0638, 0x5D9: 0x0639,
    0x5DA: 0x063A, 0x5E0: 0x0640, 0x5E1: 0x0641, 0x5E2: 0x0642,
    0x5E3: 0x0643, 0x5E4: 0x0644, 0x5E5: 0x0645, 0x5E6: 0x0646,
    0x5E7: 0x0647, 0x5E8: 0x0648, 0x5E9: 0x0649, 0x5EA: 0x064A,
    0x5EB: 0x064B, 0x5EC: 0x064C, 0x5ED: 0x064D, 0x5EE: 0x064E,
    0x5EF: 0x064F, 0x5F0: 0x0650, 0x5F1: 0x0651, 0x5F2: 0x0652,

    # Cyrillic
    0x6A1: 0x0452, 0x6A2: 0x0453, 0x6A3: 0x0451, 0x6A4: 0x0454,
    0x6A5: 0x0455, 0x6A6: 0x0456, 0x6A7: 0x0457, 0x6A8: 0x0458,
    0x6A9: 0x0459, 0x6AA: 0x045A, 0x6AB: 0x045B, 0x6AC: 0x045C,
    0x6AD: 0x0491, 0x6AE: 0x045E, 0x6AF: 0x045F, 0x6B0: 0x2116,
    0x6B1: 0x0402, 0x6B2: 0x0403, 0x6B3: 0x0401, 0x6B4: 0x0404,
    0x6B5: 0x0405, 0x6B6: 0x0406, 0x6B7: 0x0407, 0x6B8: 0x0408,
    0x6B9: 0x0409, 0x6BA: 0x040A, 0x6BB: 0x040B, 0x6BC: 0x040C,
    0x6BD: 0x0490, 0x6BE: 0x040E, 0x6BF: 0x040F, 0x6C0: 0x044E,
    0x6C1: 0x0430, 0x6C2: 0x0431, 0x6C3: 0x0446, 0x6C4: 0x0434,
    0x6C5: 0x0435, 0x6C6: 0x0444, 0x6C7: 0x0433, 0x6C8: 0x0445,
    0x6C9: 0x0438, 0x6CA: 0x0439, 0x6CB: 0x043A, 0x6CC: 0x043B,
    0x6CD: 0x043C, 0x6CE: 0x043D, 0x6CF: 0x043E, 0x6D0: 0x043F,
    0x6D1: 0x044F, 0x6D2: 0x0440, 0x6D3: 0x0441, 0x6D4: 0x0442,
    0x6D5: 0x0443, 0x6D6: 0x0436, 0x6D7: 0x0432, 0x6D8: 0x044C,
    0x6D9: 0x044B, 0x6DA: 0x0437, 0x6DB: 0x0448, 0x6DC: 0x044D,
    0x6DD: 0x0449, 0x6DE: 0x0447, 0x6DF: 0x044A, 0x6E0: 0x042E,
    0x6E1: 0x0410, 0x6E2: 0x0411, 0x6E3: 0x0426, 0x6E4: 0x0414,
    0x6E5: 0x0415, 0x6E6: 0x0424, 0x6E7: 0x0413, 0x6E8: 0x0425,
    0x6E9: 0x0418, 0x6EA: 0x0419, 0x6EB: 0x041A, 0x6EC: 0x041B,
    0x6ED: 0x041C, 0x6EE: 0x041D, 0x6EF: 0x041E, 0x6F0: 0x041F,
    0x6F1: 0x042F, 0x6F2: 0x0420, 0x6F3: 0x0421, 0x6F4: 0x0422,
    0x6F5: 0x0423, 0x6F6: 0x0416, 0x6F7: 0x0412, 0x6F8: 0x042C,
    0x6F9: 0x042B, 0x6FA: 0x0417, 0x6FB: 0x0428, 0x6FC: 0x042D,
    0x6FD: 0x0429, 0x6FE: 0x0427, 0x6FF: 0x042A,

    # Greek
    0x7A1: 0x0386, 0x7A2: 0x0388, 0x7A3: 0x0389, 0x7A4: 0x038A,
    0x7A5: 0x03AA, 0x7A7: 0x038C, 0x7A8: 0x038E, 0x7A9: 0x03AB,
    0x7AB: 0x038F, 0x7AE: 0x0385, 0x7AF: 0x2015, 0x7B1: 0x03AC,
    0x7B2: 0x03AD, 0x7B3: 0x03AE, 0x7B4: 0x03AF, 0x7B5: 0x03CA,
    0x7B6: 0x0390, 0x7B7: 0x03CC, 0x7B8: 0x03CD, 0x7B9: 0x03CB,
    0x7BA: 0x03B0, 0x7BB: 0x03CE, 0x7C1: 0x0391, 0x7C2: 0x0392,
    0x7C3: 0x0393, 0x7C4: 0x0394, 0x7C5: 0x0395, 0x7C6: 0x0396,
    0x7C7: 0x0397, 0x7C8: 0x0398, 0x7C9: 0x0399, 0x7CA: 0x039A,
    0x7CB: 0x039B, 0x7CC: 0x039C, 0x7CD: 0x039D, 0x7CE: 0x039E,
    0x7CF: 0x039F, 0x7D0: 0x03A0, 0x7D1: 0x03A1, 0x7D2: 0x03A3,
    0x7D4: 0x03A4, 0x7D5: 0x03A5, 0x7D6: 0x03A6, 0x7D7: 0x03A7,
    0x7D8: 0x03A8, 0x7D9: 0x03A9, 0x7E1: 0x03B1, 0x7E2: 0x03B2,
    0x7E3: 0x03B3, 0x7E4: 0x03B4, 0x7E5: 0x03B5, 0x7E6: 0x03B6,
    0x7E7: 0x03B7, 0x7E8: 0x03B8, 0x7E9: 0x03B9, 0x7EA: 0x03BA,
    0x7EB: 0x03BB, 0x7EC: 0x03BC, 0x7ED: 0x03BD, 0x7EE: 0x03BE,
    0x7EF: 0x03BF, 0x7F0: 0x03C0, 0x7F1: 0x03C1, 0x7F2: 0x03C3,
    0x7F3: 0x03C2, 0x7F4: 0x03C4, 0x7F5: 0x03C5, 0x7F6: 0x03C6,
    0x7F7: 0x03C7, 0x7F8: 0x03C8, 0x7F9: 0x03C9,

    # Technical
    0x8A1: 0x23B7, 0x8A4: 0x2320, 0x8A5: 0x2321, 0x8A7: 0x23A1,
    0x8A8: 0x23A3, 0x8A9: 0x23A4, 0x8AA: 0x23A6, 0x8AB: 0x239B,
    0x8AC: 0x239D, 0x8AD: 0x239E, 0x8AE: 0x23A0, 0x8AF: 0x23A8,
    0x8B0: 0x23AC, 0x8BC: 0x2264, 0x8BD: 0x2260, 0x8BE: 0x2265,
    0x8BF: 0x222B, 0x8C0: 0x2234, 0x8C1: 0x221D, 0x8C2: 0x221E,
    0x8C5: 0x2207, 0x8C8: 0x223C, 0x8C9: 0x2243, 0x8CD: 0x21D4,
    0x8CE: 0x21D2, 0x8CF: 0x2261, 0x8D6: 0x221A, 0x8DA: 0x2282,
    0x8DB: 0x2283, 0x8DC: 0x2229, 0x8DD: 0x222A, 0x8DE: 0x2227,
    0x8DF: 0x2228, 0x8EF: 0x2202, 0x8F6: 0x0192, 0x8FB: 0x2190,
    0x8FC: 0x2191, 0x8FD: 0x2192, 0x8FE: 0x2193,

    # Special
    0x9E0: 0x25C6, 0x9E1: 0x2592, 0x9E2: 0x2409, 0x9E3: 0x240C,
    0x9E4: 0x240D, 0x9E5: 0x240A, 0x9E8: 0x2424, 0x9E9: 0x240B,
    0x9EA: 0x2518, 0x9EB: 0x2510, 0x9EC: 0x250C, 0x9ED: 0x2514,
    0x9EE: 0x253C, 0x9EF: 0x23BA, 0x9F0: 0x23BB, 0x9F1: 0x2500,
    0x9F2: 0x23BC, 0x9F3: 0x23BD, 0x9F4: 0x251C, 0x9F5: 0x2524,
    0x9F6: 0x2534, 0x9F7: 0x252C, 0x9F8: 0x2502,

    # Publishing
    0xAA1: 0x2003, 0xAA2: 0x2002, 0xAA3: 0x2004, 0xAA4: 0x2005,
    0xAA5: 0x2007, 0xAA6: 0x2008, 0xAA7: 0x2009, 0xAA8: 0x200A,
    0xAA9: 0x2014, 0xAAA: 0x2013, 0xAAE: 0x2026, 0xAAF: 0x2025,
    0xAB0: 0x2153, 0xAB1: 0x2154, 0xAB2: 0x2155, 0xAB3: 0x2156,
    0xAB4: 0x2157, 0xAB5: 0x2158, 0xAB6: 0x2159, 0xAB7: 0x215A,
    0xAB8: 0x2105, 0xABB: 0x2012, 0xAC3: 0x215B, 0xAC4: 0x215C,
    0xAC5: 0x215D, 0xAC6: 0x215E, 0xAC9: 0x2122, 0xAD0: 0x2018,
    0xAD1: 0x2019, 0xAD2: 0x201C, 0xAD3: 0x201D, 0xAD4: 0x211E,
    0xAD5: 0x2030, 0xAD6: 0x2032, 0xAD7: 0x2033, 0xAD9: 0x271D,
    0xAEC: 0x2663, 0xAED: 0x2666, 0xAEE: 0x2665, 0xAF0: 0x2720,
    0xAF1: 0x2020, 0xAF2: 0x2021, 0xAF3: 0x2713, 0xAF4: 0x2717,
    0xAF5: 0x266F, 0xAF6: 0x266D, 0xAF7: 0x2642, 0xAF8: 0x2640,
    0xAF9: 0x260E, 0xAFA: 0x2315, 0xAFB: 0x2117, 0xAFC: 0x2038,
    0xAFD: 0x201A, 0xAFE: 0x201E,

    # APL
    0xBC2: 0x22A4, 0xBC4: 0x230A, 0xBCA: 0x2218, 0xBCC: 0x2395,
    0xBCE: 0x22A5, 0xBCF: 0x25CB, 0xBD3: 0x2308, 0xBDC: 0x22A3,
    0xBFC: 0x22A2,

    # Hebrew
    0xCDF: 0x2017, 0xCE0: 0x05D0, 0xCE1: 0x05D1, 0xCE2: 0x05D2,
    0xCE3: 0x05D3, 0xCE4: 0x05D4, 0xCE5: 0x05D5, 0xCE6: 0x05D6,
    0xCE7: 0x05D7, 0xCE8: 0x05D8, 0xCE9: 0x05D9, 0xCEA: 0x05DA,
    0xCEB: 0x05DB, 0xCEC: 0x05DC, 0xCED: 0x05DD, 0xCEE: 0x05DE,
    0xCEF: 0x05DF, 0xCF0: 0x05E0, 0xCF1: 0x05E1, 0xCF2: 0x05E2,
    0xCF3: 0x05E3, 0xCF4: 0x05E4, 0xCF5: 0x05E5, 0xCF6: 0x05E6,
    0xCF7: 0x05E7, 0xCF8: 0x05E8, 0xCF9: 0x05E9, 0xCFA: 0x05EA,

    # Thai
    0xDA1: 0x0E01, 0xDA2: 0x0E02, 0xDA3: 0x0E03, 0xDA4: 0x0E04,
    0xDA5: 0x0E05, 0xDA6: 0x0E06, 0xDA7: 0x0E07, 0xDA8: 0x0E08,
    0xDA9: 0x0E09, 0xDAA: 0x0E0A, 0xDAB: 0x0E0B, 0xDAC: 0x0E0C,
    0xDAD: 0x0E0D, 0xDAE: 0x0E0E, 0xDAF: 0x0E0F, 0xDB0: 0x0E10,
    0xDB1: 0x0E11, 0xDB2: 0x0E12, 0xDB3: 0x0E13, 0xDB4: 0x0E14,
    0xDB5: 0x0E15, 0xDB6: 0x0E16, 0xDB7: 0x0E17, 0xDB8: 0x0E18,
    0xDB9: 0x0E19, 0xDBA: 0x0E1A, 0xDBB: 0x0E1B, 0xDBC: 0x0E1C,
    0xDBD: 0x0E1D, 0xDBE: 0x0E1E, 0xDBF: 0x0E1F, 0xDC0: 0x0E20,
    0xDC1: 0x0E21, 0xDC2: 0x0E22, 0xDC3: 0x0E23, 0xDC4: 0x0E24,
    0xDC5: 0x0E25, 0xDC6: 0x0E26, 0xDC7: 0x0E27, 0xDC8: 0x0E28,
    0xDC9: 0x0E29, 0xDCA: 0x0E2A, 0xDCB: 0x0E2B, 0xDCC: 0x0E2C,
    0xDCD: 0x0E2D, 0xDCE: 0x0E2E, 0xDCF: 0x0E2F, 0xDD0: 0x0E30,
    0xDD1: 0x0E31, 0xDD2: 0x0E32, 0xDD3: 0x0E33, 0xDD4: 0x0E34,
    0xDD5: 0x0E35, 0xDD6: 0x0E36, 0xDD7: 0x0E37, 0xDD8: 0x0E38,
    0xDD9: 0x0E39, 0xDDA: 0x0E3A, 0xDDF: 0x0E3F, 0xDE0: 0x0E40,
    0xDE1: 0x0E41, 0xDE2: 0x0E42, 0xDE3: 0x0E43, 0xDE4: 0x0E44,
    0xDE5: 0x0E45, 0xDE6: 0x0E46, 0xDE7: 0x0E47, 0xDE8: 0x0E48,
    0xDE9: 0x0E49, 0xDEA: 0x0E4A, 0xDEB: 0x0E4B, 0xDEC: 0x0E4C,
    0xDED: 0x0E4D, 0xDF0: 0x0E50, 0xDF1: 0x0E51, 0xDF2: 0x0E52,
    0xDF3: 0x0E53, 0xDF4: 0x0E54, 0xDF5: 0x0E55, 0xDF6: 0x0E56,
    0xDF7: 0x0E57, 0xDF8: 0x0E58, 0xDF9: 0x0E59,

    # Korean
    0xEA1: 0x3131, 0xEA2: 0x3132, 0xEA3: 0x3133, 0xEA4: 0x3134,
    0xEA5: 0x3135, 0xEA6: 0x3136, 0xEA7: 0x3137, 0xEA8: 0x3138,
    0xEA9: 0x3139, 0xEAA: 0x313A, 0xEAB: 0x313B, 0xEAC: 0x313C,
    0xEAD: 0x313D, 0xEAE: 0x313E, 0xEAF: 0x313F, 0xEB0: 0x3140,
    0xEB1: 0x3141, 0xEB2: 0x3142, 0xEB3: 0x3143, 0xEB4: 0x3144,
    0xEB5: 0x3145, 0xEB6: 0x3146, 0xEB7: 0x3147, 0xEB8: 0x3148,
    0xEB9: 0x3149, 0xEBA: 0x314A, 0xEBB: 0x314B, 0xEBC: 0x314C,
    0xEBD: 0x314D, 0xEBE: 0x314E, 0xEBF: 0x314F, 0xEC0: 0x3150,
    0xEC1: 0x3151, 0xEC2: 0x3152, 0xEC3: 0x3153, 0xEC4: 0x3154,
    0xEC5: 0x3155, 0xEC6: 0x3156, 0xEC7: 0x3157, 0xEC8: 0x3158,
    0xEC9: 0x3159, 0xECA: 0x315A, 0xECB: 0x315B, 0xECC: 0x315C,
    0xECD: 0x315D, 0xECE: 0x315E, 0xECF: 0x315F, 0xED0: 0x3160,
    0xED1: 0x3161, 0xED2: 0x3162, 0xED3: 0x3163, 0xED4: 0x11A8,
    0xED5: 0x11A9, 0xED6: 0x11AA, 0xED7: 0x11AB, 0xED8: 0x11AC,
    0xED9: 0x11AD, 0xEDA: 0x11AE, 0xEDB: 0x11AF, 0xEDC: 0x11B0,
    0xEDD: 0x11B1, 0xEDE: 0x11B2, 0xEDF: 0x11B3, 0xEE0: 0x11B4,
    0xEE1: 0x11B5, 0xEE2: 0x11B6, 0xEE3: 0x11B7, 0xEE4: 0x11B8,
    0xEE5: 0x11B9, 0xEE6: 0x11BA, 0xEE7: 0x11BB, 0xEE8: 0x11BC,
    0xEE9: 0x11BD, 0xEEA: 0x11BE, 0xEEB: 0x11BF, 0xEEC: 0x11C0,
    0xEED: 0x11C1, 0xEEE: 0x11C2, 0xEEF: 0x316D, 0xEF0: 0x3171,
    0xEF1: 0x3178, 0xEF2: 0x317F, 0xEF3: 0x3181, 0xEF4: 0x3184,
    0xEF5: 0x3186, 0xEF6: 0x318D, 0xEF7: 0x318E, 0xEF8: 0x11EB,
    0xEF9: 0x11F0, 0xEFA: 0x11F9,

    # Latin-9
    0x13BC: 0x0152, 0x13BD: 0x0153, 0x13BE: 0x0178,

    # Currency
    0x20AC: 0x20AC,
}

UNICODE_TO_KEYSYM: dict[int, int] = {}
for _keysym, _code_point in LEGACY_KEYSYMS.items():
    UNICODE_TO_KEYSYM.setdefault(_code_point, _keysym)
del _keysym, _code_point


def filter_sentinels(code_points: Iterable[int]) -> list[int]:
    """Drop vertical-tab sentinels; they are never typed."""
    return [cp for cp in code_points if cp != VERTICAL_TAB]


def char_to_keysym(code_point: int) -> int:
    """
    Map a Unicode code point to an X11 keysym.

    Args:
        code_point: The character's code point.

    Returns:
        The keysym, or NO_SYMBOL if the code point cannot be represented.
    """
    if 0x20 <= code_point <= 0x7E or 0xA0 <= code_point <= 0xFF:
        return code_point

    if code_point in CONTROL_KEYSYMS:
        return CONTROL_KEYSYMS[code_point]

    if code_point < 0xA0 or code_point > MAX_CODE_POINT:
        return NO_SYMBOL

    keysym = UNICODE_TO_KEYSYM.get(code_point)
    if keysym is not None:
        return keysym

    return UNICODE_KEYSYM_FLAG | code_point


def describe_char(code_point: int) -> str:
    """Human-readable form of a code point for error messages."""
    if 0 <= code_point <= MAX_CODE_POINT and chr(code_point).isprintable():
        return chr(code_point)
    return f"U+{code_point:04X}"


_keysym_names: Optional[dict[int, str]] = None


def keysym_name(keysym: int) -> Optional[str]:
    """
    Symbolic name of a keysym, as xmodmap would print it.

    Args:
        keysym: The keysym to name.

    Returns:
        The name (e.g. "Aogonek", "EuroSign", "U1F600"), or None if unknown.
    """
    global _keysym_names
    if _keysym_names is None:
        for group in _NAMED_GROUPS:
            XK.load_keysym_group(group)
        _keysym_names = dict(_EXTRA_NAMES)
        for name, value in XK.__dict__.items():
            if name.startswith("XK_"):
                _keysym_names.setdefault(value, name[3:])

    name = _keysym_names.get(keysym)
    if name is None and keysym & 0xFF000000 == UNICODE_KEYSYM_FLAG:
        name = f"U{keysym & 0xFFFFFF:04X}"
    return name
