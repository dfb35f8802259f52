"""
treefold - find identical files across directory trees and fold them away.

Features:
- Byte-identity oracle (size check, full compare for small files, digest for large ones)
- Duplicate collapsing inside one tree with oldest/newest/highest retention
- Lossless merge of one tree into another, reporting conflicts instead of overwriting
- Bottom-up pruning of directories emptied by a merge
- Progress visualization while hashing
"""

__version__ = "1.0.0"
