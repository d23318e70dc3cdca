"""
Prompts for the section-oriented report pipeline.
"""

REPORT_PLANNER_PROMPT_TEMPLATE = """For context, the current date is {current_date}.

You are a skilled research planner. Create a plan for researching and writing a report on the provided topic.

Organize the report into logical sections that cover the key aspects of the topic. For each section:
1. Provide a clear, descriptive name
2. Write a brief overview of what the section will cover
3. Indicate whether the section needs web research (true/false)

TOPIC: {topic}

REPORT STRUCTURE:
{report_structure}

OUTPUT FORMAT:
Return only the JSON array of sections without any additional text.
[
  {{
    "name": "Section name",
    "description": "Brief description of the section content",
    "research": true,
    "content": ""
  }}
]"""

SECTION_QUERY_WRITER_PROMPT_TEMPLATE = """For context, the current date is {current_date}.

You are a search query expert who crafts precise web searches for one part of a report.

Generate {number_of_queries} search queries that will yield relevant and useful results for researching one section of a report.

TOPIC: {topic}
SECTION: {section_name}
SECTION DESCRIPTION: {section_description}

Your queries should be:
1. Specific and focused
2. Use precise terminology
3. Include important context

FORMAT YOUR RESPONSE AS JSON:
Return only a JSON object with a 'queries' array without any additional text. Each query object must use the field name 'search_query'.

Example format:
{{
  "queries": [
    {{"search_query": "first search query"}},
    {{"search_query": "second search query"}}
  ]
}}"""

SECTION_WRITER_PROMPT_TEMPLATE = """For context, the current date is {current_date}.

You are an expert content writer who creates well-researched report sections.

Write a comprehensive section for a report based on the provided sources. Your writing should:
1. Be informative, accurate, and well-structured
2. Synthesize information from multiple sources
3. Include relevant details, examples, and context
4. Be written in a clear, professional style

Do not include the section name or title at the beginning of your content. The title is added separately.

TOPIC: {topic}
SECTION NAME: {section_name}
SECTION DESCRIPTION: {section_description}
SOURCES:
{sources}

FORMAT YOUR RESPONSE AS JSON:
{{
  "content": "The section content, with paragraphs and bullet points as appropriate."
}}"""

SECTION_GRADER_PROMPT_TEMPLATE = """For context, the current date is {current_date}.

You are a quality control expert who evaluates whether a written report section meets its requirements.

Evaluate the section on these criteria:
1. Does it comprehensively cover the topic described in the section description?
2. Does it effectively synthesize information from the sources?
3. Is it well-structured and clearly written?
4. Does it provide sufficient depth and detail?

TOPIC: {topic}
SECTION NAME: {section_name}
SECTION DESCRIPTION: {section_description}
WRITTEN SECTION:
{section_content}

AVAILABLE SOURCES:
{sources}

If there are significant gaps or issues, grade the section "fail" and suggest specific follow-up search queries to address them.

FORMAT YOUR RESPONSE AS JSON:
{{
  "grade": "pass",
  "follow_up_queries": [
    {{"search_query": "specific follow-up query"}}
  ]
}}"""

FINAL_SECTION_WRITER_PROMPT_TEMPLATE = """For context, the current date is {current_date}.

You are an expert content writer who writes comprehensive report sections.

Write a complete section for a report without additional web research. Use the research materials already provided and your own knowledge.
Do not include the section name or title at the beginning of your content. The title is added separately.

TOPIC: {topic}
SECTION NAME: {section_name}
SECTION DESCRIPTION: {section_description}
EXISTING RESEARCH MATERIALS:
{research_materials}

FORMAT YOUR RESPONSE AS JSON:
{{
  "content": "The section content, with paragraphs and bullet points as appropriate."
}}"""

CONTENT_NOT_AVAILABLE = "_Content not available for this section._"
