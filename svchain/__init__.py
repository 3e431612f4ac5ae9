"""
clusters the structural variants of a sample and chains each cluster into rearranged paths through the genome
"""
from .main import SampleResult, analyse_sample

__version__ = '1.0.0'
