"""
SF3 Animation Tools

Binary codec and command-line tooling for SF3 skeletal animation files.
"""

__version__ = '0.3.0'
__author__ = 'sf3anim contributors'

from sf3anim.codec import (
    AnimationData,
    AnimationReader,
    AnimationWriter,
    FormatDescriptor,
    FormatError,
    decode,
    encode,
)

__all__ = [
    'AnimationData',
    'AnimationReader',
    'AnimationWriter',
    'FormatDescriptor',
    'FormatError',
    'decode',
    'encode',
    '__version__',
]
