"""2K roster scraper: team rosters and player attributes."""
