"""
GraphQL operations used against the Nhost (Hasura) backend.

Post and single-post reads share one selection set so both paths map through
the same denormalizer.
"""

USER_FIELDS = """
        id
        displayName
        avatarUrl
        metadata
"""

POST_FIELDS = f"""
      id
      content
      image_url
      created_at
      is_bot_post
      user {{{USER_FIELDS}      }}
      comments_aggregate {{
        aggregate {{
          count
        }}
      }}
      comments(order_by: {{ created_at: asc }}) {{
        id
        content
        created_at
        is_bot_comment
        user {{{USER_FIELDS}        }}
      }}
      likes_aggregate {{
        aggregate {{
          count
        }}
      }}
"""

GET_POSTS_QUERY = f"""
  query GetPosts {{
    posts(order_by: {{ created_at: desc }}) {{{POST_FIELDS}    }}
  }}
"""

GET_POST_BY_ID_QUERY = f"""
  query GetPostById($postId: uuid!) {{
    posts_by_pk(id: $postId) {{{POST_FIELDS}    }}
  }}
"""

ADD_POST_MUTATION = """
  mutation AddPost($userId: uuid!, $content: String!, $imageUrl: String, $isBotPost: Boolean) {
    insert_posts_one(object: {user_id: $userId, content: $content, image_url: $imageUrl, is_bot_post: $isBotPost}) {
      id
    }
  }
"""

ADD_COMMENT_MUTATION = f"""
  mutation AddComment($postId: uuid!, $userId: uuid!, $content: String!, $isBotComment: Boolean) {{
    insert_comments_one(object: {{post_id: $postId, user_id: $userId, content: $content, is_bot_comment: $isBotComment}}) {{
      id
      created_at
      content
      is_bot_comment
      user {{{USER_FIELDS}      }}
    }}
  }}
"""

LIKE_POST_MUTATION = """
  mutation LikePost($postId: uuid!, $userId: uuid!) {
    insert_post_likes_one(object: {post_id: $postId, user_id: $userId}) {
      post_id
      user_id
    }
  }
"""

UNLIKE_POST_MUTATION = """
  mutation UnlikePost($postId: uuid!, $userId: uuid!) {
    delete_post_likes_by_pk(post_id: $postId, user_id: $userId) {
      post_id
      user_id
    }
  }
"""

GET_USER_LIKES_FOR_POSTS_QUERY = """
  query GetUserLikesForPosts($userId: uuid!, $postIds: [uuid!]) {
    post_likes(where: {user_id: {_eq: $userId}, post_id: {_in: $postIds}}) {
      post_id
    }
  }
"""
