"""Bounded contexts of the recording intelligence layer.

- shared: the recorded Action model every context consumes
- filtering: noise, duplicate and redundancy removal
- locator: locator stability scoring and alternatives
- flow: business flow, intent and page segmentation
- naming: identifiers and step phrases
- assertion: verification point suggestions
- test_data: data extraction, masking and variations
- quality: scoring of generated page objects and step definitions
- recording: end-to-end analysis of a recording
"""
