"""
Prompts for the iterative research loop (query generation, analysis, reflection, report).
"""

RESEARCH_SYSTEM_PROMPT = """You are an expert research assistant. You gather facts from web sources, analyze them objectively and report clearly. Cite sources with markdown links where you use them."""

SEARCH_QUERIES_PROMPT_TEMPLATE = """For context, the current date is {current_date}.

Generate {number_of_queries} effective search queries for the following research topic.
Each query should explore a different perspective on the topic, not rephrase the same one.

Research Topic: {topic}

FORMAT YOUR RESPONSE AS JSON:
Return only a JSON object with a 'queries' array without any additional text. Each query object must use the field name 'search_query'.

Example format:
{{
  "queries": [
    {{"search_query": "first search query"}},
    {{"search_query": "second search query"}}
  ]
}}"""

ANALYZE_CONTENT_PROMPT_TEMPLATE = """For context, the current date is {current_date}.

Analyze the following web content and extract the information relevant to the research topic.
Provide a concise and objective analysis based on facts from the source.

Research Topic: {topic}
Page Title: {title}
URL: {url}

Content:
{text}

Ensure that all insights, evaluations, and extracted information are presented clearly.

Analysis:"""

REFLECTION_PROMPT_TEMPLATE = """For context, the current date is {current_date}.

You are tasked with reflecting on the current state of research to identify gaps and next steps.
First, summarize what has been learned so far about the research topic. Then identify:
1. What important questions remain unanswered?
2. What perspectives or angles haven't been explored yet?
3. What contradictions or inconsistencies exist in the information gathered?
4. What additional information would strengthen the research?

Research Topic: {topic}

Current Research Findings:
{findings}

Be thoughtful and critical in your assessment, providing specific directions for further investigation.

Reflection:"""

REFINE_RESEARCH_PROMPT_TEMPLATE = """For context, the current date is {current_date}.

Review the information collected so far and identify important aspects or missing perspectives that should be investigated further.
Suggest concrete directions for deeper understanding that take these new perspectives into account.

Research Topic: {topic}

Findings collected so far:
{findings}

Aspects to explore further:"""

FINAL_REPORT_PROMPT_TEMPLATE = """For context, the current date is {current_date}.

Create a comprehensive and structured research report based on the findings below.
Include the following elements in your report:
1. Executive Summary
2. Key Findings (3-5 bullet points)
3. Detailed Analysis (divided into subsections)
4. Conclusions and Insights
5. Future Research Directions

IMPORTANT: Maintain inline links with facts using markdown format: [link text](url).

Research Topic: {topic}

Research Findings:
{findings}

Research Report:"""

NO_FINDINGS_REPORT_TEMPLATE = """# Research Report: {topic}

## Executive Summary

No information was found for this topic. The searches performed did not return any content that could be analyzed.

## Suggestions

- Rephrase the topic with more specific or more common terms.
- Try a different search provider.
- Run the research again later; the sources may have been temporarily unavailable.
"""

REFLECTION_BLOCK_TEMPLATE = "{findings}\n\nReflection on Current Findings:\n{reflection}"

REFLECTIONS_SECTION_HEADER = "Research Process Reflections"
