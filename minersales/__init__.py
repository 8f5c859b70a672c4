"""
MinerSales commission engine.

Pure computation of revenue, margin, net profit and tiered compensation
for the mining-equipment sales team, plus the reporting service that
every dashboard and performance view reads from.
"""

__version__ = "1.0.0"
