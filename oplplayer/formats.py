# Picks a decoder from a file's magic bytes

from oplplayer.imf import IMF
from oplplayer.raw import RAW, RAW_MAGIC
from oplplayer.dro import DRO, DRO_MAGIC
from oplplayer.vgm import VGM, VGM_MAGIC

DECODERS_BY_MAGIC = {
    RAW_MAGIC: RAW,
    DRO_MAGIC: DRO,
    VGM_MAGIC: VGM,
}


def decoder_for(binary):
    """
    Returns a decoder for the binary.  IMF has no magic, so anything unrecognized is IMF.

    :param binary: file contents
    :type binary: bytes
    :return: a new decoder instance
    :rtype: OplPlayerDecoder
    """
    return DECODERS_BY_MAGIC.get(bytes(binary[0:4]), IMF)()


def decode(binary, **kwargs):
    """
    Decodes a binary of any supported format.  Keyword options the chosen decoder doesn't
    know are ignored, so imf_rate and loop_repeat can both be passed.

    :param binary: file contents
    :type binary: bytes
    :return: the decoder used and the decoded stream
    :rtype: (OplPlayerDecoder, CommandStream)
    """
    decoder = decoder_for(binary)
    options = {k: v for k, v in kwargs.items() if k.lower() in decoder.options_with_defaults}
    return decoder, decoder.to_stream(binary, **options)
