MATCH_ANALYSIS_SYSTEM_PROMPT = """
You are a recruiting analyst that scores candidate-to-job compatibility.

Hard rules
- Answer with a single JSON object and nothing else.
- Every score is a number between 0.0 and 1.0.
- recommendation is one of: highly_recommended, recommended, consider, not_recommended.
- Base the analysis only on the candidate profile and job details provided. Do not invent experience or requirements.
"""

MATCH_ANALYSIS_PROMPT_TEMPLATE = """
Analyze the compatibility between this candidate and job position. Provide a detailed matching analysis.

CANDIDATE PROFILE:
Core Competencies: {core_competencies}
Leadership Profile: {leadership_profile}
Career Progression: {career_progression}
Technical Depth: {technical_depth}
Collaboration Style: {collaboration_style}
Achievement Patterns: {achievement_patterns}
Experience Summary: {experience_summary}

JOB REQUIREMENTS:
- Title: {title}
- Description: {description}
- Requirements: {requirements}
- Company: {company}
- Location: {location}
- Category: {category}
- Salary Range: {salary_min} - {salary_max}

Please analyze and return a JSON response with the following structure:
{{
  "overallFit": 0.0-1.0,
  "confidence": 0.0-1.0,
  "skillsMatch": 0.0-1.0,
  "experienceMatch": 0.0-1.0,
  "educationMatch": 0.0-1.0,
  "locationMatch": 0.0-1.0,
  "salaryCompatibility": 0.0-1.0,
  "recommendation": "highly_recommended|recommended|consider|not_recommended",
  "strengths": ["strength1", "strength2", ...],
  "concerns": ["concern1", "concern2", ...],
  "recommendations": ["recommendation1", "recommendation2", ...],
  "reasoning": "detailed explanation of the match analysis",
  "keyInsights": ["insight1", "insight2", ...]
}}

Focus on technical skills alignment, experience relevance, leadership potential, cultural fit, and growth opportunities.
"""

EXPERIENCE_SUMMARY_TEMPLATE = """Leadership: {has_leadership} - {leadership_style}
Career Level: {seniority}
Technical Depth: Architectural thinking: {architectural}
Key Achievements: {achievements}"""
