"""
Pages HTML factices pour les tests des scrapers.
"""

RT_PAGE_WITH_JSON_LD = """
<html><head>
<script type="application/ld+json">
{"@type": "TVSeries", "name": "Breaking Bad",
 "aggregateRating": {"@type": "AggregateRating", "ratingValue": "96", "ratingCount": 120},
 "audience": {"audienceScore": "97%"}}
</script>
</head><body>
<rt-text slot="criticsScore">50%</rt-text>
<rt-text slot="audienceScore">40%</rt-text>
</body></html>
"""

RT_PAGE_DOM_ONLY = """
<html><head>
<script type="application/ld+json">{not valid json</script>
</head><body>
<score-board>
  <rt-text slot="criticsScore">87%</rt-text>
  <rt-text slot="audienceScore">79%</rt-text>
</score-board>
</body></html>
"""

RT_PAGE_WITHOUT_SCORE = """
<html><body><h1>Breaking Bad</h1><p>Pas encore de critiques.</p></body></html>
"""

MC_PAGE_WITH_JSON_LD = """
<html><head>
<script type="application/ld+json">
{"@type": "TVSeries", "name": "Breaking Bad",
 "aggregateRating": {"ratingValue": 87, "bestRating": 100},
 "review": {"reviewRating": {"ratingValue": "9.3"}}}
</script>
</head><body>
<div class="c-siteReviewScore_background-critic_medium"><span>12</span></div>
</body></html>
"""

MC_PAGE_DOM_ONLY = """
<html><body>
<div class="c-siteReviewScore_background-critic_medium"><span>tbd</span></div>
<div class="c-productScoreInfo_scoreNumber"><span>74</span></div>
<div class="c-siteReviewScore_background-user"><span>8.1</span></div>
</body></html>
"""

MC_PAGE_WITHOUT_SCORE = """
<html><body><div class="c-productHero_title">Some Show</div></body></html>
"""

RT_PAGE_WITH_RATING_LIST = """
<html><head>
<script type="application/ld+json">
{"@type": "TVSeries", "name": "Severance",
 "aggregateRating": [{"@type": "AggregateRating", "ratingValue": 90}],
 "audience": [{"audienceScore": "88%"}]}
</script>
</head><body></body></html>
"""

MC_PAGE_WITH_REVIEW_LIST = """
<html><head>
<script type="application/ld+json">
{"@type": "TVSeries", "name": "Severance",
 "aggregateRating": {"ratingValue": 83},
 "review": [{"reviewRating": {"ratingValue": "8.4"}}, {"reviewRating": {"ratingValue": "2"}}]}
</script>
</head><body></body></html>
"""
