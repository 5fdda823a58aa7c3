from copy import deepcopy
from typing import Any, TypedDict, TypeVar, cast

import requests

from rewarder.errors import EmptyQueryError, TooManyLoopsError
from rewarder.models import GraphQL_Response


class GraphQLConfig(TypedDict):
    """
    Typechecker for JSON/Dict data to be passed to the graph
    :param `query`: the query to send to The Graph
    :param `variables`: injected query params in dictionary format
    """

    query: str
    variables: dict[str, Any]


# python insantiates generics separate to function definition
T = TypeVar("T")


def extract_nested_graphql(res: GraphQL_Response, access_path: list[str]):
    """
    This function walks through a dictionary until it finds the data you want.

    :param `access_path`: in the format ['first_key', 'nested_key_level0', 'nested_key_level1', ....]
    :param `res`: api response from graphql. First key should be 'data'
    """
    deepcopy_access_path = deepcopy(access_path)
    current = res["data"]
    while len(deepcopy_access_path) > 0:
        current = current[deepcopy_access_path.pop(0)]
    return current


def graphql_post(url: str, params: GraphQLConfig) -> GraphQL_Response:
    response: GraphQL_Response = requests.post(url, json=params).json()

    if not response:
        raise EmptyQueryError(f"No results for graph query to {url}")
    if "errors" in response:
        raise EmptyQueryError(
            f"Error in graph query to {url}: {cast(dict, response)['errors']}"
        )
    return response


def graphql_iterate_query(
    url: str, access_path: list[str], params: GraphQLConfig, max_loops: int = 1000
) -> list[T]:
    """
    The graph allows fetching of Max 1000 results for subgraphs.
    This function pages through results with `skip` and stops when a page comes back empty
    :param `url`: the subgraph endpoint
    :param `access_path`: eg ['hypervisorShares'] - set of keys to fetch data
    :param `params`: GraphQL config such as the actual query and variables
    """
    all_results: list[T] = list(
        extract_nested_graphql(graphql_post(url, params), access_path)
    )

    current_batch = all_results
    loops = 0
    while len(current_batch) > 0:
        if loops > max_loops:
            raise TooManyLoopsError("graphql_iterate_query")
        params["variables"]["skip"] = len(all_results)
        current_batch = extract_nested_graphql(graphql_post(url, params), access_path)
        all_results += current_batch
        loops += 1
    return all_results
