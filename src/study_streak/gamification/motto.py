"""Motivational motto of the day."""

from datetime import date

MOTTOS = [
    "Le droit est une discipline, pas un sprint ! Avancez pas à pas.",
    "La jurisprudence d'aujourd'hui est la loi de demain. Soyez à jour !",
    "Nul n'est censé ignorer la loi. Mais vous, vous la maîtriserez !",
    "Un petit effort quotidien vaut mieux que de grandes peurs la veille de l'examen.",
    "Le succès est la somme de petits efforts répétés jour après jour. Continuez !",
]


def daily_motto(today: date) -> str:
    """Pick the motto indexed by the day of the year, so it changes daily."""
    day_of_year = today.timetuple().tm_yday
    return MOTTOS[day_of_year % len(MOTTOS)]
