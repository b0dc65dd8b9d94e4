"""
chelo - Elo ratings from Challonge brackets

Pulls completed matches for a list of Challonge tournaments, keeps them in
a local JSON cache so known tournaments are never fetched twice, and rates
every player who appears in the requested tournaments.

Main components:
- challonge: API client, raw record models and the match normalizer
- cache: persistent tournament -> match results cache
- elo: Elo calculator and the rating engine
- pipeline: the fetch/cache/rate driver
- cli: command-line entry point
"""

__version__ = "1.0.0"
