import math
import struct

import pytest

from tsmkit.float_bits import FloatCodecError
from tsmkit.float_decoder import SENTINEL, decode
from tsmkit.float_encoder import encode


def _from_bits(bits):
    return struct.unpack(">d", struct.pack(">Q", bits))[0]


def _bits(value):
    return struct.unpack(">Q", struct.pack(">d", value))[0]


def test_encode_no_values():
    assert encode([]) == b""


def test_encode_special_values():
    src = [
        100.0,
        222.12,
        _from_bits(0x7FF8000000000001),
        45.324,
        math.nan,
        2453.023,
        -1234.235312132,
        math.inf,
        -math.inf,
        9123419329123.1234,
        _from_bits(0x7FF0000000000002),
        -19292929929292929292.22,
        -0.0000000000000000000000000092,
    ]
    got = decode(encode(src))
    assert len(got) == len(src)
    assert [_bits(v) for v in got] == [_bits(v) for v in src]


ROUND_TRIP_CASES = {
    "from reference paper": [12.0, 12.0, 24.0, 13.0, 24.0, 24.0, 24.0, 23.0],
    "failed in previous implementation": [
        -3.8970913068231994e307,
        -9.036931257783943e307,
        1.7173073833490201e308,
        -9.312369166661538e307,
        -2.2435523083555231e307,
        1.4779121287289644e307,
        1.771273431601434e308,
        8.140360378221364e307,
        4.783405048208089e307,
        -2.8044680049605344e307,
        4.412915337205696e307,
        -1.2779380602005046e308,
        1.6235802318921885e308,
        -1.3402901846299688e307,
        1.6961015582104055e308,
        -1.067980796435633e308,
        -3.02868987458268e307,
        1.7641793640790284e308,
        1.6587191845856813e307,
        -1.786073304985983e308,
        1.0694549382051123e308,
        3.5635180996210295e307,
    ],
    "previous example as natural numbers": [
        -38970913068231994.0,
        -9036931257783943.0,
        171730738334902010.0,
        -9312369166661538.0,
        -22435523083555231.0,
        14779121287289644.0,
        17712734316014340.0,
        8140360378221364.0,
        4783405048208089.0,
        -28044680049605344.0,
        4412915337205696.0,
        -127793806020050460.0,
        162358023189218850.0,
        -13402901846299688.0,
        169610155821040550.0,
        -10679807964356330.0,
        -302868987458268.0,
        176417936407902840.0,
        16587191845856813.0,
        -17860733049859830.0,
        106945493820511230.0,
        35635180996210295.0,
    ],
    "similar values": [6.00065e06, 6.000656e06, 6.000657e06, 6.000659e06, 6.000661e06],
    "two hours data": [
        761.0, 727.0, 763.0, 706.0, 700.0, 679.0, 757.0, 708.0, 739.0, 707.0, 699.0,
        740.0, 729.0, 766.0, 730.0, 715.0, 705.0, 693.0, 765.0, 724.0, 799.0, 761.0,
        737.0, 766.0, 756.0, 719.0, 722.0, 801.0, 747.0, 731.0, 742.0, 744.0, 791.0,
        750.0, 759.0, 809.0, 751.0, 705.0, 770.0, 792.0, 727.0, 762.0, 772.0, 721.0,
        748.0, 753.0, 744.0, 716.0, 776.0, 659.0, 789.0, 766.0, 758.0, 690.0, 795.0,
        770.0, 758.0, 723.0, 767.0, 765.0, 693.0, 706.0, 681.0, 727.0, 724.0, 780.0,
        678.0, 696.0, 758.0, 740.0, 735.0, 700.0, 742.0, 747.0, 752.0, 734.0, 743.0,
        732.0, 746.0, 770.0, 780.0, 710.0, 731.0, 712.0, 712.0, 741.0, 770.0, 770.0,
        754.0, 718.0, 670.0, 775.0, 749.0, 795.0, 756.0, 741.0, 787.0, 721.0, 745.0,
        782.0, 765.0, 780.0, 811.0, 790.0, 836.0, 743.0, 858.0, 739.0, 762.0, 770.0,
        752.0, 763.0, 795.0, 792.0, 746.0, 786.0, 785.0, 774.0, 786.0, 718.0,
    ],
    "identical values": [12123.1234] * 1000,
    "real cpu values": [
        11.286653185035389,
        3.7310629773381745,
        1.6102858569466982,
        1.691305437233776,
        1.8957345971563981,
        3.625453181647706,
        10.073740782402199,
        7.99398571607568,
        4.598130841121495,
        5.293527345709985,
        6.247661803217359,
        4.296777416937297,
        1.3373328333958254,
        1.5998000249968753,
        3.0139394700489763,
        2.0558185895838523,
    ],
}


@pytest.mark.parametrize("name", sorted(ROUND_TRIP_CASES))
def test_encode_round_trip(name):
    src = ROUND_TRIP_CASES[name]
    assert decode(encode(src)) == src


def test_header_and_first_value_stored_whole():
    encoded = encode([12.0, 24.0, 13.0])
    assert encoded[0] == 16
    assert struct.unpack(">d", encoded[1:9])[0] == 12.0


def test_single_value_round_trip():
    assert decode(encode([-0.5])) == [-0.5]


def test_identical_values_compress_well():
    encoded = encode([12123.1234] * 1000)
    assert len(encoded) < 200


def test_sentinel_after_first_value_is_rejected():
    with pytest.raises(FloatCodecError, match="unsupported value"):
        encode([1.0, _from_bits(SENTINEL)])


def test_generator_input_is_accepted():
    src = [1.5, 2.5, 2.5, -7.25]
    assert decode(encode(v for v in src)) == src